# itda/schemas/analysis_schemas.py
"""
AI 관계 분석 결과 스키마

필드 이름은 분석 엔진 JSON 과 저장 형식을 그대로 따른다 (camelCase).
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

HEATMAP_HOURS = 24


class RelationshipMode(str, Enum):
    WORK = "WORK"
    ROMANCE = "ROMANCE"
    FRIEND = "FRIEND"
    OTHER = "OTHER"


class SpeakerShare(BaseModel):
    name: str
    percentage: float = Field(ge=0, le=100)


class BalanceRatio(BaseModel):
    speaker1: SpeakerShare
    speaker2: SpeakerShare


class Sentiment(BaseModel):
    positive: float = Field(ge=0, le=100)
    negative: float = Field(ge=0, le=100)
    neutral: float = Field(ge=0, le=100)


class SpeakerResponseTime(BaseModel):
    name: str
    time: Optional[float] = Field(default=None, ge=0)  # 분 단위, 알 수 없으면 None


class AvgResponseTime(BaseModel):
    speaker1: SpeakerResponseTime
    speaker2: SpeakerResponseTime


class SentimentPoint(BaseModel):
    time_percentage: float = Field(ge=0, le=100)
    sentiment_score: float = Field(ge=-1, le=1)


class AnalysisResult(BaseModel):
    intimacyScore: int = Field(ge=0, le=100)
    balanceRatio: BalanceRatio
    sentiment: Sentiment
    avgResponseTime: AvgResponseTime
    summary: str
    recommendation: str
    sentimentFlow: List[SentimentPoint]
    responseHeatmap: List[float]
    suggestedReplies: List[str] = []
    attentionPoints: List[str] = []
    suggestedTopics: List[str] = []

    @field_validator("sentimentFlow")
    @classmethod
    def _flow_not_empty(cls, value):
        if not value:
            raise ValueError("sentimentFlow must contain at least one point")
        return value

    @field_validator("responseHeatmap")
    @classmethod
    def _heatmap_shape(cls, value):
        if len(value) != HEATMAP_HOURS:
            raise ValueError(f"responseHeatmap must have exactly {HEATMAP_HOURS} entries, got {len(value)}")
        if any(v < 0 for v in value):
            raise ValueError("responseHeatmap entries must be non-negative")
        return value


class SimulationResult(BaseModel):
    newIntimacyScore: int = Field(ge=0, le=100)
    newRecommendation: str


class SelfAnalysisResult(BaseModel):
    initiative: int = 50
    emotion: int = 50
    expression: int = 50
    tempo: int = 50
