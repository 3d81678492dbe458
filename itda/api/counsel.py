# itda/api/counsel.py
"""
인물별 상담 API
"""

from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from itda.api.errors import to_http_exception
from itda.chains.counsel_chain import counsel_chain
from itda.errors import ItdaError
from itda.schemas.counsel_schemas import CounselHistoryResponse, CounselRequest, CounselResponse
from itda.services.person_service import person_service
from itda.utils.logger import logger

router = APIRouter(prefix="/persons", tags=["counsel"])


@router.post("/{owner_id}/{person_name}/counsel", response_model=CounselResponse)
async def ask_counsel(owner_id: str, person_name: str, request: CounselRequest):
    """누적 대화 기반 상담 답변 생성 + 상담 기록 저장"""
    try:
        result = await counsel_chain.ask(
            owner_id=owner_id,
            person_name=person_name,
            question=request.question,
            history_text=request.conversationContext,
            language=request.language
        )

        return CounselResponse(
            status="success" if result.persisted else "degraded",
            answer=result.answer,
            persisted=result.persisted,
            warning=result.warning,
            used_passages=result.passages
        )

    except ItdaError as e:
        raise to_http_exception(e, request.language)
    except Exception as e:
        logger.error(f" 상담 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{owner_id}/{person_name}/counsel", response_model=CounselHistoryResponse)
async def get_counsel_history(owner_id: str, person_name: str, accept_language: Optional[str] = Header(default=None)):
    try:
        messages = await person_service.get_counsel_messages(owner_id, person_name)
        return CounselHistoryResponse(status="success", messages=messages)
    except ItdaError as e:
        raise to_http_exception(e, accept_language)
    except Exception as e:
        logger.error(f" 상담 기록 조회 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))
