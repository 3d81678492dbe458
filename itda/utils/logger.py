import logging
import os
from itda.config import settings

def setup_logger():
    """로거 설정"""

    logger = logging.getLogger("itda")
    logger.setLevel(getattr(logging, settings.log_level.upper()))

    # 이미 핸들러가 있으면 중복 방지
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, settings.log_level.upper()))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def setup_tracing():
    """LangSmith 추적 환경변수 설정 (설정된 경우에만)"""
    if not (settings.langsmith_tracing and settings.langsmith_api_key):
        return False
    os.environ["LANGCHAIN_TRACING_V2"] = "true"
    os.environ["LANGCHAIN_API_KEY"] = settings.langsmith_api_key
    os.environ["LANGCHAIN_ENDPOINT"] = settings.langsmith_endpoint or ""
    os.environ["LANGCHAIN_PROJECT"] = settings.langsmith_project or "default"
    return True

# 전역 로거 인스턴스
logger = setup_logger()
