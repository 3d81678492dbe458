# itda/api/persons.py
"""
인물 기록 / 관계 분석 API
"""

from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from itda.api.errors import to_http_exception
from itda.errors import ItdaError
from itda.schemas.person_schemas import (
    DeletePersonResponse,
    LanguageRequest,
    PersonDetailResponse,
    PersonListResponse,
    SimulationRequest,
    SimulationResponse,
    StoredAnalysis,
    TranscriptRequest,
    TranscriptResponse,
)
from itda.schemas.analysis_schemas import SelfAnalysisResult
from itda.services.person_service import person_service
from itda.utils.logger import logger

router = APIRouter(prefix="/persons", tags=["persons"])


@router.get("/{owner_id}", response_model=PersonListResponse)
async def list_persons(owner_id: str, accept_language: Optional[str] = Header(default=None)):
    """관계 지도용 인물 목록 (최근 갱신 순)"""
    try:
        persons = await person_service.list_persons(owner_id)
        return PersonListResponse(status="success", persons=persons)
    except ItdaError as e:
        raise to_http_exception(e, accept_language)
    except Exception as e:
        logger.error(f" 인물 목록 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{owner_id}/self-analysis", response_model=SelfAnalysisResult)
async def self_analysis(owner_id: str, accept_language: Optional[str] = Header(default=None)):
    """모든 인물과의 대화로 본인 대화 스타일 분석"""
    try:
        return await person_service.self_analysis(owner_id)
    except ItdaError as e:
        raise to_http_exception(e, accept_language)
    except Exception as e:
        logger.error(f" 자기 분석 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{owner_id}/{person_name}", response_model=PersonDetailResponse)
async def get_person(owner_id: str, person_name: str, accept_language: Optional[str] = Header(default=None)):
    try:
        record = await person_service.get_person(owner_id, person_name)
        return PersonDetailResponse(
            status="success",
            person=StoredAnalysis.from_record(record),
            history=record.history,
            version=record.version
        )
    except ItdaError as e:
        raise to_http_exception(e, accept_language)
    except Exception as e:
        logger.error(f" 인물 조회 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{owner_id}/{person_name}/transcripts", response_model=TranscriptResponse)
async def submit_transcript(owner_id: str, person_name: str, request: TranscriptRequest):
    """대화 제출 → 누적 기록 병합 → AI 분석 → 저장"""
    try:
        logger.info(f" 대화 제출: owner={owner_id}, name='{person_name}', new={request.isNewPerson}")

        result = await person_service.submit(
            owner_id=owner_id,
            person_name=person_name,
            transcript=request.transcript,
            mode=request.mode,
            is_new_person=request.isNewPerson,
            language=request.language,
            expected_version=request.expectedVersion
        )

        return TranscriptResponse(
            status="success" if result.persisted else "degraded",
            person=result.person,
            historyCount=result.history_count,
            version=result.version,
            persisted=result.persisted,
            warning=result.warning
        )

    except ItdaError as e:
        raise to_http_exception(e, request.language)
    except Exception as e:
        logger.error(f" 대화 제출 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{owner_id}/{person_name}", response_model=DeletePersonResponse)
async def delete_person(owner_id: str, person_name: str, accept_language: Optional[str] = Header(default=None)):
    """기록/분석/상담 메시지 일괄 삭제"""
    try:
        await person_service.delete_person(owner_id, person_name)
        return DeletePersonResponse(status="deleted", name=person_name)
    except ItdaError as e:
        raise to_http_exception(e, accept_language)
    except Exception as e:
        logger.error(f" 인물 삭제 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{owner_id}/{person_name}/simulate", response_model=SimulationResponse)
async def simulate(owner_id: str, person_name: str, request: SimulationRequest):
    """응답 속도 변화 시뮬레이션"""
    try:
        result = await person_service.simulate(
            owner_id, person_name, request.responseTimePercentage, request.language
        )
        return SimulationResponse(status="success", result=result)
    except ItdaError as e:
        raise to_http_exception(e, request.language)
    except Exception as e:
        logger.error(f" 시뮬레이션 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{owner_id}/{person_name}/translate", response_model=StoredAnalysis)
async def translate(owner_id: str, person_name: str, request: LanguageRequest):
    try:
        return await person_service.translate(owner_id, person_name, request.language)
    except ItdaError as e:
        raise to_http_exception(e, request.language)
    except Exception as e:
        logger.error(f" 번역 API 오류: {e}")
        raise HTTPException(status_code=500, detail=str(e))
