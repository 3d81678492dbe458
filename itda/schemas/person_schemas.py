# itda/schemas/person_schemas.py
"""
인물 기록 / 분석 제출 관련 스키마
"""

from datetime import datetime
from typing import List, Optional, Literal

from pydantic import BaseModel

from .analysis_schemas import AnalysisResult, RelationshipMode, SimulationResult
from .commons_schemas import BaseResponse, Language

SELF_SPEAKER_NAME = "Me"


class CounselMessage(BaseModel):
    id: str
    role: Literal["user", "assistant"]
    content: str


class PersonRecord(BaseModel):
    """저장소의 인물 문서 (history + analysis + counsel_messages)"""
    owner_id: str
    name: str
    mode: RelationshipMode
    history: List[str]
    analysis: AnalysisResult
    counsel_messages: List[CounselMessage] = []
    version: int = 1
    counsel_version: int = 0
    updated_at: Optional[datetime] = None


class StoredAnalysis(BaseModel):
    id: str
    date: str
    mode: RelationshipMode
    speaker1Name: str = SELF_SPEAKER_NAME
    speaker2Name: str
    result: AnalysisResult

    @classmethod
    def from_record(cls, record: PersonRecord) -> "StoredAnalysis":
        # speaker2Name 은 항상 인물 이름 (분석 결과의 화자 이름 사용 금지)
        return cls(
            id=f"{record.owner_id}_{record.name}",
            date=record.updated_at.isoformat() if record.updated_at else "",
            mode=record.mode,
            speaker2Name=record.name,
            result=record.analysis,
        )


class SubmissionResult(BaseModel):
    person: StoredAnalysis
    history_count: int
    version: Optional[int] = None
    persisted: bool = True
    warning: Optional[str] = None


# 요청 스키마
class TranscriptRequest(BaseModel):
    transcript: str
    mode: RelationshipMode = RelationshipMode.OTHER
    isNewPerson: bool = False
    language: Language = "ko"
    expectedVersion: Optional[int] = None


class SimulationRequest(BaseModel):
    responseTimePercentage: float
    language: Language = "ko"


class LanguageRequest(BaseModel):
    language: Language = "ko"


# 응답 스키마
class TranscriptResponse(BaseResponse):
    person: StoredAnalysis
    historyCount: int
    version: Optional[int] = None
    persisted: bool = True
    warning: Optional[str] = None


class PersonDetailResponse(BaseResponse):
    person: StoredAnalysis
    history: List[str]
    version: int


class PersonListResponse(BaseResponse):
    persons: List[StoredAnalysis]


class DeletePersonResponse(BaseResponse):
    name: str


class SimulationResponse(BaseResponse):
    result: SimulationResult
