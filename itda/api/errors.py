# itda/api/errors.py
"""
도메인 오류 → HTTPException 변환
"""

from typing import Optional

from fastapi import HTTPException

from itda.errors import (
    AnalysisMalformed,
    ConcurrentModification,
    EmbeddingUnavailable,
    GenerationUnavailable,
    InputInvalid,
    ItdaError,
    NameCollision,
    PersonNotFound,
    RetrievalUnavailable,
    StoreUnavailable,
)

STATUS_CODES = {
    InputInvalid: 400,
    PersonNotFound: 404,
    NameCollision: 409,
    ConcurrentModification: 409,
    AnalysisMalformed: 502,
    EmbeddingUnavailable: 503,
    RetrievalUnavailable: 503,
    GenerationUnavailable: 503,
}


def status_code_for(error: ItdaError) -> int:
    if isinstance(error, StoreUnavailable):
        return 403 if error.kind == StoreUnavailable.PERMISSION else 503
    return STATUS_CODES.get(type(error), 500)


def to_http_exception(error: ItdaError, language: Optional[str] = None) -> HTTPException:
    return HTTPException(
        status_code=status_code_for(error),
        detail={"code": error.message_key, "message": error.user_message(language)}
    )
