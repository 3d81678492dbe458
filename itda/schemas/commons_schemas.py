# itda/schemas/commons_schemas.py
"""
공통 스키마 - 여러 API에서 공유하는 스키마들
"""

from pydantic import BaseModel
from typing import Optional, Literal

Language = Literal["ko", "en"]

# 기본 응답 스키마
class BaseResponse(BaseModel):
    status: str
    message: Optional[str] = None
    timestamp: Optional[str] = None

# 오류 상세 (HTTPException.detail)
class ErrorDetail(BaseModel):
    code: str
    message: str
