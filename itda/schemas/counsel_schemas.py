# itda/schemas/counsel_schemas.py
"""
상담 챗봇 관련 스키마
"""

from pydantic import BaseModel
from typing import List, Optional, Dict, Any

from .commons_schemas import BaseResponse, Language
from .person_schemas import CounselMessage


# POST /api/chat
class ChatRequest(BaseModel):
    message: str
    conversationContext: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str


class RetrievedPassage(BaseModel):
    text: str
    score: float
    metadata: Dict[str, Any] = {}


class CounselAnswer(BaseModel):
    """상담 1턴 결과 (저장 실패는 warning 으로만 전달)"""
    answer: str
    persisted: bool = True
    warning: Optional[str] = None
    passages: List[RetrievedPassage] = []


class CounselRequest(BaseModel):
    question: str
    conversationContext: Optional[str] = None
    language: Language = "ko"


class CounselResponse(BaseResponse):
    answer: str
    persisted: bool = True
    warning: Optional[str] = None
    used_passages: Optional[List[RetrievedPassage]] = None


class CounselHistoryResponse(BaseResponse):
    messages: List[CounselMessage]
