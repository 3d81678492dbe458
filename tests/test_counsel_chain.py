"""RAG 상담 체인 테스트"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from langchain_core.embeddings import DeterministicFakeEmbedding

from itda.chains.counsel_chain import CounselChain, new_message_id
from itda.errors import (
    ConcurrentModification,
    EmbeddingUnavailable,
    GenerationUnavailable,
    InputInvalid,
    PersonNotFound,
    RetrievalUnavailable,
    StoreUnavailable,
)
from itda.prompts.counsel_prompt import CounselPrompts
from itda.schemas.analysis_schemas import RelationshipMode
from itda.services.rag_service import EmbeddingGateway
from tests.fakes.fake_gateways import (
    FailingChatModel,
    FailingEmbeddings,
    FakeVectorIndex,
    RecordingChatModel,
)

OWNER = "user-1"
ANSWER = "먼저 주말에 시간이 되는지 가볍게 물어보세요."


@pytest.fixture
def gateway():
    return EmbeddingGateway(embeddings=DeterministicFakeEmbedding(size=768), dimensions=768)


@pytest_asyncio.fixture
async def jordan(store, analysis):
    await store.create_person(OWNER, "Jordan", RelationshipMode.ROMANCE, ["A: hi\nB: hey"], analysis)
    return "Jordan"


def make_chain(store, gateway, index=None, llm=None, **kwargs):
    return CounselChain(
        embedding_gateway=gateway,
        vector_index=index if index is not None else FakeVectorIndex(),
        llm=llm or RecordingChatModel(responses=[ANSWER]),
        store=store,
        **kwargs,
    )


def system_prompt(llm, call=0):
    return llm.received[call][0].content


class TestAsk:
    @pytest.mark.asyncio
    async def test_empty_index_still_answers(self, store, gateway, jordan):
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, llm=llm)

        result = await chain.ask(OWNER, jordan, "How do I ask them out?")

        assert result.answer == ANSWER
        assert result.persisted is True
        assert result.passages == []
        prompt = system_prompt(llm)
        assert CounselPrompts.NO_KNOWLEDGE in prompt
        assert "A: hi\nB: hey" in prompt

    @pytest.mark.asyncio
    async def test_turn_is_persisted_in_order(self, store, gateway, jordan):
        chain = make_chain(store, gateway)

        await chain.ask(OWNER, jordan, "첫 질문")
        await chain.ask(OWNER, jordan, "두 번째 질문")

        messages = await store.get_counsel_messages(OWNER, jordan)
        assert [m.role for m in messages] == ["user", "assistant", "user", "assistant"]
        assert [m.content for m in messages] == ["첫 질문", ANSWER, "두 번째 질문", ANSWER]

    @pytest.mark.asyncio
    async def test_context_follows_ranking(self, store, gateway, jordan):
        index = FakeVectorIndex(passages=[
            {"text": "Smile.", "score": 0.9},
            {"text": "", "score": 0.8},
            {"text": "Remember their name.", "score": 0.7},
            {"text": "Never shown.", "score": 0.6},
        ])
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, index=index, llm=llm)

        result = await chain.ask(OWNER, jordan, "How do I make a good impression?")

        prompt = system_prompt(llm)
        assert "Smile.\n\nRemember their name." in prompt
        assert "Never shown." not in prompt
        assert CounselPrompts.NO_KNOWLEDGE not in prompt
        assert len(result.passages) == 3

    @pytest.mark.asyncio
    async def test_only_question_is_embedded(self, store, gateway, jordan):
        index = FakeVectorIndex()
        chain = make_chain(store, gateway, index=index)

        await chain.ask(OWNER, jordan, "What should I say?")

        call = index.calls[0]
        assert call["vector"] == await gateway.embed("What should I say?")
        assert call["top_k"] == 3
        assert call["include_metadata"] is True

    @pytest.mark.asyncio
    async def test_passages_without_text_mean_no_knowledge(self, store, gateway, jordan):
        index = FakeVectorIndex(passages=[{"text": "", "score": 0.5, "metadata": {"source": "x"}}])
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, index=index, llm=llm)

        await chain.ask(OWNER, jordan, "Any tips?")

        assert CounselPrompts.NO_KNOWLEDGE in system_prompt(llm)

    @pytest.mark.asyncio
    async def test_history_is_trimmed_to_recent_text(self, store, gateway, analysis):
        await store.create_person(OWNER, "Casey", RelationshipMode.FRIEND, ["OLD" + "x" * 100, "recent tail"], analysis)
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, llm=llm, history_max_chars=20)

        await chain.ask(OWNER, "Casey", "What now?")

        prompt = system_prompt(llm)
        assert "recent tail" in prompt
        assert "OLD" not in prompt

    @pytest.mark.asyncio
    async def test_persist_failure_keeps_answer(self, store, gateway, jordan):
        chain = make_chain(store, gateway)
        store.append_counsel_messages = AsyncMock(
            side_effect=StoreUnavailable("denied", kind=StoreUnavailable.PERMISSION)
        )

        result = await chain.ask(OWNER, jordan, "Help?", language="en")

        assert result.answer == ANSWER
        assert result.persisted is False
        assert result.warning == StoreUnavailable(kind=StoreUnavailable.PERMISSION).user_message("en")

    @pytest.mark.asyncio
    async def test_concurrent_counsel_write_keeps_answer(self, store, gateway, jordan):
        chain = make_chain(store, gateway)
        store.append_counsel_messages = AsyncMock(
            side_effect=ConcurrentModification("counsel messages of 'Jordan' changed concurrently")
        )

        result = await chain.ask(OWNER, jordan, "Help?")

        assert result.answer == ANSWER
        assert result.persisted is False
        assert result.warning == ConcurrentModification().user_message("ko")

    @pytest.mark.asyncio
    async def test_raw_question_is_generated_and_saved(self, store, gateway, jordan):
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, llm=llm)
        question = "  어떻게 말을 꺼내지?\n"

        await chain.ask(OWNER, jordan, question)

        assert llm.received[0][-1].content == question
        messages = await store.get_counsel_messages(OWNER, jordan)
        assert messages[0].content == question

    @pytest.mark.asyncio
    async def test_explicit_zero_limits_are_kept(self, store, gateway, jordan):
        index = FakeVectorIndex(passages=[{"text": "Smile.", "score": 0.9}])
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, index=index, llm=llm, top_k=0, history_max_chars=0)

        await chain.ask(OWNER, jordan, "Help?")

        assert index.calls[0]["top_k"] == 0
        prompt = system_prompt(llm)
        assert CounselPrompts.NO_KNOWLEDGE in prompt
        assert CounselPrompts.NO_HISTORY in prompt
        assert "A: hi\nB: hey" not in prompt


class TestAskFailures:
    @pytest.mark.asyncio
    async def test_empty_question_fails_before_embedding(self, store, jordan):
        embeddings = AsyncMock()
        chain = make_chain(store, EmbeddingGateway(embeddings=embeddings, dimensions=768))

        with pytest.raises(InputInvalid):
            await chain.ask(OWNER, jordan, "   ")

        embeddings.aembed_query.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_person(self, store, gateway):
        chain = make_chain(store, gateway)

        with pytest.raises(PersonNotFound):
            await chain.ask(OWNER, "Nobody", "Help?")

    @pytest.mark.asyncio
    async def test_embedding_failure(self, store, jordan):
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, EmbeddingGateway(embeddings=FailingEmbeddings(), dimensions=768), llm=llm)

        with pytest.raises(EmbeddingUnavailable):
            await chain.ask(OWNER, jordan, "Help?")

        assert llm.received == []
        assert await store.get_counsel_messages(OWNER, jordan) == []

    @pytest.mark.asyncio
    async def test_wrong_embedding_dimension(self, store, jordan):
        small = EmbeddingGateway(embeddings=DeterministicFakeEmbedding(size=16), dimensions=768)
        chain = make_chain(store, small)

        with pytest.raises(EmbeddingUnavailable):
            await chain.ask(OWNER, jordan, "Help?")

    @pytest.mark.asyncio
    async def test_retrieval_failure(self, store, gateway, jordan):
        chain = make_chain(store, gateway, index=FakeVectorIndex(fail=True))

        with pytest.raises(RetrievalUnavailable):
            await chain.ask(OWNER, jordan, "Help?")

        assert await store.get_counsel_messages(OWNER, jordan) == []

    @pytest.mark.asyncio
    async def test_generation_failure_persists_nothing(self, store, gateway, jordan):
        chain = make_chain(store, gateway, llm=FailingChatModel(responses=["unused"]))

        with pytest.raises(GenerationUnavailable):
            await chain.ask(OWNER, jordan, "Help?")

        assert await store.get_counsel_messages(OWNER, jordan) == []

    @pytest.mark.asyncio
    async def test_blank_generation_is_unavailable(self, store, gateway, jordan):
        chain = make_chain(store, gateway, llm=RecordingChatModel(responses=["   "]))

        with pytest.raises(GenerationUnavailable):
            await chain.ask(OWNER, jordan, "Help?")


class TestAnswer:
    @pytest.mark.asyncio
    async def test_answer_without_person_record(self, store, gateway):
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, llm=llm)

        result = await chain.answer("고백해도 될까?", history_text="A: 오늘 재밌었어")

        assert result.answer == ANSWER
        assert result.persisted is False
        assert "A: 오늘 재밌었어" in system_prompt(llm)

    @pytest.mark.asyncio
    async def test_answer_without_history(self, store, gateway):
        llm = RecordingChatModel(responses=[ANSWER])
        chain = make_chain(store, gateway, llm=llm)

        await chain.answer("Hello?")

        assert CounselPrompts.NO_HISTORY in system_prompt(llm)


def test_message_ids_are_unique_and_prefixed():
    ids = {new_message_id("u") for _ in range(50)}

    assert len(ids) == 50
    assert all(i.startswith("u_") for i in ids)
