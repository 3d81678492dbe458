"""In-memory stand-ins for the external gateways used in tests."""

from typing import Any, Dict, List

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from itda.errors import RetrievalUnavailable
from itda.schemas.analysis_schemas import AnalysisResult
from itda.schemas.counsel_schemas import RetrievedPassage


def sample_analysis(**overrides) -> Dict[str, Any]:
    data = {
        "intimacyScore": 72,
        "balanceRatio": {
            "speaker1": {"name": "A", "percentage": 55},
            "speaker2": {"name": "B", "percentage": 45},
        },
        "sentiment": {"positive": 60, "negative": 10, "neutral": 30},
        "avgResponseTime": {
            "speaker1": {"name": "A", "time": 4.5},
            "speaker2": {"name": "B", "time": None},
        },
        "summary": "서로 편하게 안부를 주고받는 사이예요.",
        "recommendation": "먼저 주말 계획을 물어보세요.",
        "sentimentFlow": [
            {"time_percentage": round(i * 100 / 19, 2), "sentiment_score": 0.1}
            for i in range(20)
        ],
        "responseHeatmap": [float(hour % 5) for hour in range(24)],
        "suggestedReplies": ["좋아!", "언제 볼까?"],
        "attentionPoints": ["답장이 늦어지지 않게 해보세요.", "농담의 수위를 조절하세요."],
        "suggestedTopics": ["주말 계획", "최근 본 영화"],
    }
    data.update(overrides)
    return data


class RecordingChatModel(FakeListChatModel):
    """FakeListChatModel that also keeps the messages it was called with."""

    received: List[Any] = []

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(messages)
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)


class FailingChatModel(FakeListChatModel):
    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        raise RuntimeError("model endpoint unreachable")


class FailingEmbeddings(Embeddings):
    def embed_documents(self, texts):
        raise RuntimeError("embedding quota exceeded")

    def embed_query(self, text):
        raise RuntimeError("embedding quota exceeded")


class FakeVectorIndex:
    """Returns canned passages in the given (ranked) order."""

    def __init__(self, passages=None, fail=False):
        self.passages = [
            p if isinstance(p, RetrievedPassage) else RetrievedPassage(**p)
            for p in (passages or [])
        ]
        self.fail = fail
        self.calls = []

    async def query(self, vector, top_k=3, include_metadata=True):
        self.calls.append({"vector": vector, "top_k": top_k, "include_metadata": include_metadata})
        if self.fail:
            raise RetrievalUnavailable("index offline")
        return self.passages[:top_k]


class RecordingAnalyzer:
    """Analysis engine stand-in that records the text it was asked to analyze."""

    def __init__(self, result: AnalysisResult = None, on_analyze=None):
        self.result = result or AnalysisResult.model_validate(sample_analysis())
        self.on_analyze = on_analyze
        self.calls = []

    async def analyze(self, text, mode, language="ko"):
        self.calls.append({"text": text, "mode": mode, "language": language})
        if self.on_analyze is not None:
            await self.on_analyze()
        return self.result
