# itda/schemas/knowledge_schemas.py
"""
상담 지식 베이스 관리 스키마
"""

from pydantic import BaseModel
from typing import List, Optional, Dict, Any

from .commons_schemas import BaseResponse


class KnowledgePassage(BaseModel):
    text: str
    source: str = "how_to_win_friends"
    metadata: Optional[Dict[str, Any]] = None


class KnowledgeStoreRequest(BaseModel):
    passages: List[KnowledgePassage]


class KnowledgeStoreResponse(BaseResponse):
    stored_count: int
    collection: str


class KnowledgeDeleteRequest(BaseModel):
    source: str


class KnowledgeDeleteResponse(BaseResponse):
    collection: str
    source: str
