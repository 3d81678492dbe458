# itda/services/database_service.py
"""
인물 기록 저장소
SQLAlchemy 기반 비동기 DB 연결

- history/analysis 는 한 번의 UPDATE 로 함께 기록 (VERSION 조건부)
- 상담 메시지는 최신 목록을 다시 읽어 뒤에 붙인 뒤 COUNSEL_VERSION 조건부로 기록
"""

from typing import Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import update, delete
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, ProgrammingError

from itda.config import settings
from itda.errors import (
    AnalysisMalformed,
    ConcurrentModification,
    NameCollision,
    PersonNotFound,
    StoreUnavailable,
)
from itda.models import Base, Person, as_kst, now_kst
from itda.schemas.analysis_schemas import AnalysisResult, RelationshipMode
from itda.schemas.person_schemas import CounselMessage, PersonRecord
from itda.utils.logger import logger

# MySQL 접근 거부 계열 오류 코드
ACCESS_DENIED_CODES = {1044, 1045, 1142, 1227}
# 테이블/DB 없음
NOT_PROVISIONED_CODES = {1049, 1146}


class DatabaseService:
    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or settings.async_database_url
        self.engine = create_async_engine(self.database_url, echo=settings.debug, pool_pre_ping=True, pool_recycle=3600)
        self.async_session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        logger.info(" DatabaseService 초기화 완료")

    async def create_tables(self):
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info(" 데이터베이스 테이블 생성 완료")
        except SQLAlchemyError as e:
            logger.error(f" 테이블 생성 실패: {e}")
            raise self._store_error(e) from e

    def _store_error(self, e: SQLAlchemyError) -> StoreUnavailable:
        """SQLAlchemy 오류 → StoreUnavailable (오프라인/권한/미구성 구분)"""
        orig = getattr(e, "orig", None)
        args = getattr(orig, "args", None) or ()
        errno = args[0] if args else None

        if errno in ACCESS_DENIED_CODES:
            kind = StoreUnavailable.PERMISSION
        elif errno in NOT_PROVISIONED_CODES or isinstance(e, ProgrammingError) or "no such table" in str(e):
            kind = StoreUnavailable.NOT_PROVISIONED
        else:
            kind = StoreUnavailable.OFFLINE
        return StoreUnavailable(str(e), kind=kind)

    def _to_record(self, row: Person) -> PersonRecord:
        try:
            analysis = AnalysisResult.model_validate(row.ANALYSIS)
        except ValidationError as e:
            raise AnalysisMalformed(f"stored analysis for '{row.PERSON_NAME}' is invalid: {e}") from e
        return PersonRecord(
            owner_id=row.OWNER_ID,
            name=row.PERSON_NAME,
            mode=RelationshipMode(row.MODE),
            history=list(row.HISTORY or []),
            analysis=analysis,
            counsel_messages=[CounselMessage.model_validate(m) for m in (row.COUNSEL_MESSAGES or [])],
            version=row.VERSION,
            counsel_version=row.COUNSEL_VERSION,
            updated_at=as_kst(row.UPDATED_AT),
        )

    def _person_key(self, owner_id: str, name: str):
        return (Person.OWNER_ID == owner_id, Person.PERSON_NAME == name)

    async def get_person(self, owner_id: str, name: str) -> Optional[PersonRecord]:
        try:
            async with self.async_session() as session:
                query = select(Person).where(*self._person_key(owner_id, name))
                result = await session.execute(query)
                row = result.scalar_one_or_none()
                if not row:
                    return None
                return self._to_record(row)
        except SQLAlchemyError as e:
            logger.error(f" 인물 조회 실패: {e}")
            raise self._store_error(e) from e

    async def list_persons(self, owner_id: str) -> List[PersonRecord]:
        try:
            async with self.async_session() as session:
                query = select(Person).where(
                    Person.OWNER_ID == owner_id
                ).order_by(Person.UPDATED_AT.desc())
                result = await session.execute(query)
                return [self._to_record(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f" 인물 목록 조회 실패: {e}")
            raise self._store_error(e) from e

    async def create_person(
        self,
        owner_id: str,
        name: str,
        mode: RelationshipMode,
        history: List[str],
        analysis: AnalysisResult,
    ) -> PersonRecord:
        """신규 인물 INSERT. 같은 키가 이미 있으면 NameCollision"""
        now = now_kst()
        person = Person(
            OWNER_ID=owner_id,
            PERSON_NAME=name,
            MODE=RelationshipMode(mode).value,
            HISTORY=list(history),
            ANALYSIS=analysis.model_dump(mode="json"),
            COUNSEL_MESSAGES=[],
            VERSION=1,
            COUNSEL_VERSION=0,
            CREATED_AT=now,
            UPDATED_AT=now,
        )
        try:
            async with self.async_session() as session:
                session.add(person)
                await session.commit()
                logger.info(f" 인물 생성 완료: owner={owner_id}, name='{name}'")
                return self._to_record(person)
        except IntegrityError as e:
            logger.warning(f" 인물 생성 충돌: owner={owner_id}, name='{name}'")
            raise NameCollision(f"person '{name}' already exists") from e
        except SQLAlchemyError as e:
            logger.error(f" 인물 생성 실패: {e}")
            raise self._store_error(e) from e

    async def update_analysis(
        self,
        owner_id: str,
        name: str,
        history: List[str],
        analysis: AnalysisResult,
        expected_version: int,
    ) -> PersonRecord:
        """history + analysis 를 한 번에 기록. VERSION 이 다르면 ConcurrentModification"""
        try:
            async with self.async_session() as session:
                stmt = (
                    update(Person)
                    .where(*self._person_key(owner_id, name), Person.VERSION == expected_version)
                    .values(
                        HISTORY=list(history),
                        ANALYSIS=analysis.model_dump(mode="json"),
                        VERSION=Person.VERSION + 1,
                        UPDATED_AT=now_kst(),
                    )
                    .execution_options(synchronize_session=False)
                )
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    await session.rollback()
                    logger.warning(f" 버전 충돌: owner={owner_id}, name='{name}', expected={expected_version}")
                    raise ConcurrentModification(
                        f"person '{name}' changed since version {expected_version}"
                    )

                row = (await session.execute(
                    select(Person).where(*self._person_key(owner_id, name))
                )).scalar_one()
                record = self._to_record(row)
                await session.commit()
                logger.info(f" 분석 갱신 완료: name='{name}', version={record.version}, history={len(history)}개")
                return record
        except SQLAlchemyError as e:
            logger.error(f" 분석 갱신 실패: {e}")
            raise self._store_error(e) from e

    async def get_counsel_messages(self, owner_id: str, name: str) -> List[CounselMessage]:
        try:
            async with self.async_session() as session:
                query = select(Person.COUNSEL_MESSAGES).where(*self._person_key(owner_id, name))
                result = await session.execute(query)
                row = result.first()
                if row is None:
                    raise PersonNotFound(f"person '{name}' not found")
                return [CounselMessage.model_validate(m) for m in (row[0] or [])]
        except SQLAlchemyError as e:
            logger.error(f" 상담 메시지 조회 실패: {e}")
            raise self._store_error(e) from e

    async def append_counsel_messages(
        self,
        owner_id: str,
        name: str,
        new_messages: List[CounselMessage],
    ) -> List[CounselMessage]:
        """
        최신 상담 목록을 읽어 새 메시지를 붙이고 전체 목록을 다시 기록

        읽은 뒤 다른 요청이 먼저 기록했다면 ConcurrentModification.
        """
        try:
            async with self.async_session() as session:
                query = select(Person.COUNSEL_MESSAGES, Person.COUNSEL_VERSION).where(
                    *self._person_key(owner_id, name)
                )
                row = (await session.execute(query)).first()
                if row is None:
                    raise PersonNotFound(f"person '{name}' not found")

                current_messages, counsel_version = row
                messages: List[Dict] = list(current_messages or [])
                messages.extend(m.model_dump() for m in new_messages)

                stmt = (
                    update(Person)
                    .where(*self._person_key(owner_id, name), Person.COUNSEL_VERSION == counsel_version)
                    .values(COUNSEL_MESSAGES=messages, COUNSEL_VERSION=Person.COUNSEL_VERSION + 1)
                    .execution_options(synchronize_session=False)
                )
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    await session.rollback()
                    raise ConcurrentModification(f"counsel messages of '{name}' changed concurrently")
                await session.commit()

                logger.info(f" 상담 메시지 저장 완료: name='{name}', total={len(messages)}")
                return [CounselMessage.model_validate(m) for m in messages]
        except SQLAlchemyError as e:
            logger.error(f" 상담 메시지 저장 실패: {e}")
            raise self._store_error(e) from e

    async def delete_person(self, owner_id: str, name: str) -> bool:
        """기록/분석/상담 메시지를 한 번에 삭제"""
        try:
            async with self.async_session() as session:
                stmt = delete(Person).where(*self._person_key(owner_id, name))
                result = await session.execute(stmt)
                await session.commit()
                deleted = result.rowcount > 0
                logger.info(f"🗑️ 인물 삭제: name='{name}', deleted={deleted}")
                return deleted
        except SQLAlchemyError as e:
            logger.error(f" 인물 삭제 실패: {e}")
            raise self._store_error(e) from e

    async def close(self):
        await self.engine.dispose()
        logger.info("🔌 데이터베이스 연결 종료")

# 전역 인스턴스화
database_service = DatabaseService()
