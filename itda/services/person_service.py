# itda/services/person_service.py
"""
인물 단위 작업 흐름

대화 제출: 입력 검증 → 기존 기록 조회 → 병합 → AI 분석 → history/analysis 단일 기록
"""

from typing import List, Optional

from itda.chains.analysis_chain import AnalysisChain, analysis_chain
from itda.errors import (
    ConcurrentModification,
    InputInvalid,
    NameCollision,
    PersonNotFound,
    StoreUnavailable,
)
from itda.schemas.analysis_schemas import RelationshipMode, SelfAnalysisResult, SimulationResult
from itda.schemas.person_schemas import (
    CounselMessage,
    PersonRecord,
    StoredAnalysis,
    SubmissionResult,
)
from itda.services.database_service import DatabaseService, database_service
from itda.services.history_aggregator import (
    collect_self_history,
    merge_history,
    validate_submission,
)
from itda.utils.logger import logger


class PersonService:
    def __init__(self, store: Optional[DatabaseService] = None, analyzer: Optional[AnalysisChain] = None):
        self.store = store or database_service
        self.analyzer = analyzer or analysis_chain

    async def submit(
        self,
        owner_id: str,
        person_name: str,
        transcript: str,
        mode: RelationshipMode,
        is_new_person: bool,
        language: str = "ko",
        expected_version: Optional[int] = None,
    ) -> SubmissionResult:
        """
        새 대화 제출

        NameCollision / ConcurrentModification 은 그대로 실패시킨다.
        분석 후 저장소가 응답하지 않으면 분석 결과는 돌려주고 persisted=False 로 알린다.
        """
        validate_submission(person_name, transcript)

        existing = await self.store.get_person(owner_id, person_name)

        # 이름 충돌은 버전 확인보다 먼저, 분석 엔진 호출 전에 확인
        updated_history, analysis_input = merge_history(
            person_name,
            transcript,
            is_new_person,
            existing.history if existing is not None else None,
        )

        if existing is not None and expected_version is not None and existing.version != expected_version:
            raise ConcurrentModification(
                f"person '{person_name}' is at version {existing.version}, expected {expected_version}"
            )

        if existing is not None and RelationshipMode(mode) != existing.mode:
            logger.info(f" 관계 유형은 생성 후 변경하지 않음: '{person_name}' {existing.mode.value} 유지")
        person_mode = existing.mode if existing is not None else RelationshipMode(mode)

        analysis = await self.analyzer.analyze(analysis_input, person_mode, language)

        try:
            if existing is None:
                record = await self._create(owner_id, person_name, person_mode, updated_history, analysis, is_new_person)
            else:
                record = await self.store.update_analysis(
                    owner_id, person_name, updated_history, analysis, expected_version=existing.version
                )
        except StoreUnavailable as e:
            logger.warning(f" 분석 결과 저장 실패 (결과는 반환): {e}")
            unsaved = PersonRecord(
                owner_id=owner_id,
                name=person_name,
                mode=person_mode,
                history=updated_history,
                analysis=analysis,
                version=existing.version if existing is not None else 0,
                updated_at=existing.updated_at if existing is not None else None,
            )
            return SubmissionResult(
                person=StoredAnalysis.from_record(unsaved),
                history_count=len(updated_history),
                persisted=False,
                warning=e.user_message(language),
            )

        return SubmissionResult(
            person=StoredAnalysis.from_record(record),
            history_count=len(record.history),
            version=record.version,
        )

    async def _create(self, owner_id, person_name, mode, history, analysis, is_new_person) -> PersonRecord:
        try:
            return await self.store.create_person(owner_id, person_name, mode, history, analysis)
        except NameCollision as e:
            if is_new_person:
                raise
            # 추가 모드에서 생성으로 처리하던 중 다른 요청이 먼저 생성함
            raise ConcurrentModification(f"person '{person_name}' was created concurrently") from e

    async def get_person(self, owner_id: str, person_name: str) -> PersonRecord:
        record = await self.store.get_person(owner_id, person_name)
        if record is None:
            raise PersonNotFound(f"person '{person_name}' not found")
        return record

    async def list_persons(self, owner_id: str) -> List[StoredAnalysis]:
        records = await self.store.list_persons(owner_id)
        return [StoredAnalysis.from_record(record) for record in records]

    async def delete_person(self, owner_id: str, person_name: str):
        deleted = await self.store.delete_person(owner_id, person_name)
        if not deleted:
            raise PersonNotFound(f"person '{person_name}' not found")

    async def get_counsel_messages(self, owner_id: str, person_name: str) -> List[CounselMessage]:
        return await self.store.get_counsel_messages(owner_id, person_name)

    async def simulate(
        self,
        owner_id: str,
        person_name: str,
        response_time_percentage: float,
        language: str = "ko",
    ) -> SimulationResult:
        record = await self.get_person(owner_id, person_name)
        return await self.analyzer.simulate(record.analysis, response_time_percentage, record.mode, language)

    async def translate(self, owner_id: str, person_name: str, language: str) -> StoredAnalysis:
        """저장된 분석을 다른 언어로 번역 (저장소는 변경하지 않음)"""
        record = await self.get_person(owner_id, person_name)
        translated = await self.analyzer.translate(record.analysis, language)
        return StoredAnalysis.from_record(record.model_copy(update={"analysis": translated}))

    async def self_analysis(self, owner_id: str) -> SelfAnalysisResult:
        records = await self.store.list_persons(owner_id)
        combined = collect_self_history(records)
        if not combined:
            raise InputInvalid("no conversations to analyze")
        logger.info(f" 자기 분석 요청: owner={owner_id}, persons={len(records)}")
        return await self.analyzer.analyze_self(combined)


person_service = PersonService()
