# itda/config.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="allow")

    # OpenAI
    openai_api_key: str
    chat_model: str = "gpt-4o-mini"
    analysis_model: str = "gpt-4o"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 768

    # Qdrant (상담 지식 베이스)
    qdrant_url: str
    qdrant_api_key: Optional[str] = None
    knowledge_collection: str = "relationship_knowledge"

    # 상담 설정
    counsel_top_k: int = 3
    counsel_history_max_chars: int = 16000

    # MySQL
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_user: str = "itda"
    mysql_password: str = ""
    mysql_database: str = "itda"
    database_url: Optional[str] = None  # 지정 시 MySQL 설정보다 우선

    # LangChain LangSmith 트래킹 관련
    langsmith_tracing: Optional[bool] = False
    langsmith_endpoint: Optional[str] = "https://api.smith.langchain.com"
    langsmith_api_key: Optional[str] = None
    langsmith_project: Optional[str] = "default"

    # App Settings
    debug: bool = True
    log_level: str = "INFO"

    @property
    def async_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"mysql+aiomysql://{self.mysql_user}:{self.mysql_password}@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}"

settings = Settings()
