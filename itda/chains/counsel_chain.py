from enum import Enum
from typing import List, Optional, Tuple
from uuid import uuid4
import time

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from langsmith import traceable

from itda.config import settings
from itda.errors import GenerationUnavailable, InputInvalid, ItdaError, PersonNotFound
from itda.prompts.counsel_prompt import CounselPrompts
from itda.schemas.analysis_schemas import RelationshipMode
from itda.schemas.counsel_schemas import CounselAnswer, RetrievedPassage
from itda.schemas.person_schemas import SELF_SPEAKER_NAME, CounselMessage
from itda.services.database_service import DatabaseService, database_service
from itda.services.history_aggregator import join_history
from itda.services.rag_service import EmbeddingGateway, VectorIndex, embedding_gateway, vector_index
from itda.utils.logger import logger, setup_tracing

setup_tracing()


class CounselStage(str, Enum):
    IDLE = "IDLE"
    EMBEDDING = "EMBEDDING"
    RETRIEVING = "RETRIEVING"
    GENERATING = "GENERATING"
    PERSISTING = "PERSISTING"
    FAILED = "FAILED"


def new_message_id(prefix: str) -> str:
    """u_1720000000000_a1b2c3 형식"""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid4().hex[:6]}"


class CounselChain:
    """
    RAG 상담 체인

    질문 임베딩 → 지식 검색 → 프롬프트 구성 → 답변 생성 → 상담 기록 저장.
    요청 사이에 상태를 남기지 않으며, 각 단계는 이전 단계 결과에 의존하므로 순차 실행한다.
    """

    def __init__(
        self,
        embedding_gateway: Optional[EmbeddingGateway] = None,
        vector_index: Optional[VectorIndex] = None,
        llm: Optional[BaseChatModel] = None,
        store: Optional[DatabaseService] = None,
        top_k: Optional[int] = None,
        history_max_chars: Optional[int] = None,
    ):
        self.embedding_gateway = embedding_gateway or EmbeddingGateway()
        self.vector_index = vector_index or VectorIndex()
        self.store = store or database_service
        self.top_k = settings.counsel_top_k if top_k is None else top_k
        self.history_max_chars = settings.counsel_history_max_chars if history_max_chars is None else history_max_chars
        self.llm = llm or ChatOpenAI(
            model=settings.chat_model,
            temperature=0.7,
            openai_api_key=settings.openai_api_key
        )
        self.chain = self._build_chain()
        logger.info(" CounselChain 초기화 완료")

    def _build_chain(self):
        prompt_template = ChatPromptTemplate.from_messages([
            ("system", CounselPrompts.SYSTEM),
            ("human", "{question}")
        ])
        return prompt_template | self.llm | StrOutputParser()

    def _enter(self, stage: CounselStage, request_id: str):
        logger.debug(f" [{request_id}] 상담 단계 → {stage.value}")

    def _build_context(self, passages: List[RetrievedPassage]) -> str:
        """검색 순위대로 구절 텍스트를 빈 줄로 연결 (텍스트 없는 항목은 제외)"""
        return "\n\n".join(p.text.strip() for p in passages if p.text and p.text.strip())

    def _knowledge_section(self, retrieved_context: str) -> str:
        if not retrieved_context:
            return CounselPrompts.NO_KNOWLEDGE
        return CounselPrompts.KNOWLEDGE_CONTEXT.format(retrieved_context=retrieved_context)

    def _trim_history(self, history_text: Optional[str]) -> str:
        text = (history_text or "").strip()
        if not text:
            return CounselPrompts.NO_HISTORY
        # 최근 대화 위주로 뒤쪽만 유지
        trimmed = text[max(0, len(text) - self.history_max_chars):]
        return trimmed or CounselPrompts.NO_HISTORY

    async def _run(
        self,
        request_id: str,
        question: str,
        history_text: Optional[str],
        mode: Optional[RelationshipMode],
        language: str,
        speaker2_name: str,
    ) -> Tuple[str, List[RetrievedPassage]]:
        stage = CounselStage.IDLE
        try:
            stage = CounselStage.EMBEDDING
            self._enter(stage, request_id)
            vector = await self.embedding_gateway.embed(question)

            stage = CounselStage.RETRIEVING
            self._enter(stage, request_id)
            passages = await self.vector_index.query(vector, top_k=self.top_k, include_metadata=True)
            retrieved_context = self._build_context(passages)
            if not retrieved_context:
                logger.info(f" [{request_id}] 관련 지식 없음 → 일반 공감 답변")

            stage = CounselStage.GENERATING
            self._enter(stage, request_id)
            try:
                answer = await self.chain.ainvoke({
                    "language_name": CounselPrompts.LANGUAGE_NAMES.get(language, CounselPrompts.LANGUAGE_NAMES["ko"]),
                    "mode": RelationshipMode(mode).value if mode else RelationshipMode.OTHER.value,
                    "speaker1_name": SELF_SPEAKER_NAME,
                    "speaker2_name": speaker2_name,
                    "knowledge_section": self._knowledge_section(retrieved_context),
                    "history_text": self._trim_history(history_text),
                    "question": question,
                })
            except Exception as e:
                logger.error(f" [{request_id}] 답변 생성 실패: {e}")
                raise GenerationUnavailable(str(e)) from e

            answer = (answer or "").strip()
            if not answer:
                raise GenerationUnavailable("generation returned an empty answer")
            return answer, passages

        except ItdaError as e:
            self._enter(CounselStage.FAILED, request_id)
            logger.warning(f" [{request_id}] 상담 실패 ({stage.value}): {e.code}")
            raise

    @traceable(name="counsel_answer")
    async def answer(
        self,
        question: str,
        history_text: str = "",
        mode: Optional[RelationshipMode] = None,
        language: str = "ko",
    ) -> CounselAnswer:
        """저장 없이 답변만 생성 (POST /api/chat)"""
        if not question or not question.strip():
            raise InputInvalid("question is empty")

        request_id = uuid4().hex[:8]
        answer, passages = await self._run(request_id, question, history_text, mode, language, "Partner")
        self._enter(CounselStage.IDLE, request_id)
        return CounselAnswer(answer=answer, persisted=False, passages=passages)

    @traceable(name="counsel_ask")
    async def ask(
        self,
        owner_id: str,
        person_name: str,
        question: str,
        history_text: Optional[str] = None,
        language: str = "ko",
    ) -> CounselAnswer:
        """인물별 상담 1턴: 답변 생성 후 상담 기록에 질문/답변 추가"""
        # 질문 원문은 그대로 생성/저장에 사용
        if not question or not question.strip():
            raise InputInvalid("question is empty")
        if not person_name or not person_name.strip():
            raise InputInvalid("person name is empty")

        record = await self.store.get_person(owner_id, person_name)
        if record is None:
            raise PersonNotFound(f"person '{person_name}' not found")
        if history_text is None:
            history_text = join_history(record.history)

        request_id = uuid4().hex[:8]
        logger.info(f" [{request_id}] 상담 요청: name='{person_name}', question='{question[:30]}...'")
        answer, passages = await self._run(request_id, question, history_text, record.mode, language, person_name)

        # 답변은 이미 생성됨: 저장 실패는 경고로만 전달
        self._enter(CounselStage.PERSISTING, request_id)
        persisted = True
        warning = None
        try:
            await self.store.append_counsel_messages(owner_id, person_name, [
                CounselMessage(id=new_message_id("u"), role="user", content=question),
                CounselMessage(id=new_message_id("a"), role="assistant", content=answer),
            ])
        except ItdaError as e:
            logger.warning(f" [{request_id}] 상담 기록 저장 실패 (답변은 반환): {e}")
            persisted = False
            warning = e.user_message(language)

        self._enter(CounselStage.IDLE, request_id)
        return CounselAnswer(answer=answer, persisted=persisted, warning=warning, passages=passages)


# 글로벌 인스턴스
counsel_chain = CounselChain(embedding_gateway, vector_index)
