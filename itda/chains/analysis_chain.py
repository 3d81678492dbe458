from typing import Any, Dict, Optional
import json

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage
from langchain_openai import ChatOpenAI
from langsmith import traceable
from pydantic import ValidationError

from itda.config import settings
from itda.errors import AnalysisMalformed, GenerationUnavailable, InputInvalid
from itda.prompts.analysis_prompt import (
    get_analysis_prompt,
    get_self_analysis_prompt,
    get_simulation_prompt,
    get_translation_prompt,
)
from itda.schemas.analysis_schemas import (
    AnalysisResult,
    RelationshipMode,
    SelfAnalysisResult,
    SimulationResult,
)
from itda.utils.logger import logger, setup_tracing

setup_tracing()


def strip_code_fence(text: str) -> str:
    """```json ... ``` 형태의 마크다운 코드 블록 제거"""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]
    return cleaned.strip()


def clamp_score(value: Any, default: int = 50) -> int:
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(0, min(100, number))


class AnalysisChain:
    """AI 관계 분석 엔진 호출 + 결과 검증"""

    def __init__(self, llm: Optional[BaseChatModel] = None):
        self.llm = llm or ChatOpenAI(
            model=settings.analysis_model,
            temperature=0.3,
            openai_api_key=settings.openai_api_key
        )

    async def _complete(self, prompt: str) -> str:
        try:
            response = await self.llm.ainvoke([{"role": "user", "content": prompt}])
        except Exception as e:
            logger.error(f" 분석 엔진 호출 실패: {e}")
            raise GenerationUnavailable(str(e)) from e
        return response.content if isinstance(response, AIMessage) else str(response)

    def _parse_json(self, text: str) -> Dict:
        try:
            data = json.loads(strip_code_fence(text))
        except json.JSONDecodeError as e:
            logger.error(f" 분석 결과 JSON 파싱 실패: {text[:100]}...")
            raise AnalysisMalformed(f"analysis engine returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise AnalysisMalformed("analysis engine returned a non-object JSON value")
        return data

    def _validate_analysis(self, data: Dict) -> AnalysisResult:
        # 스키마 위반은 부분 보정 없이 그대로 실패
        try:
            return AnalysisResult.model_validate(data)
        except ValidationError as e:
            logger.error(f" 분석 결과 스키마 위반: {e.error_count()}건")
            raise AnalysisMalformed(str(e)) from e

    @traceable(name="analyze_conversation")
    async def analyze(self, text: str, mode: RelationshipMode, language: str = "ko") -> AnalysisResult:
        """누적 대화 문자열 → AnalysisResult"""
        if not text or not text.strip():
            raise InputInvalid("analysis input is empty")

        mode_value = RelationshipMode(mode).value
        logger.info(f" 관계 분석 요청: mode={mode_value}, language={language}, length={len(text)}")

        raw = await self._complete(get_analysis_prompt(text, mode_value, language))
        result = self._validate_analysis(self._parse_json(raw))

        logger.info(f" 관계 분석 완료: intimacy={result.intimacyScore}")
        return result

    async def translate(self, analysis: AnalysisResult, language: str) -> AnalysisResult:
        raw = await self._complete(get_translation_prompt(analysis.model_dump(mode="json"), language))
        return self._validate_analysis(self._parse_json(raw))

    async def simulate(
        self,
        analysis: AnalysisResult,
        response_time_percentage: float,
        mode: RelationshipMode,
        language: str = "ko"
    ) -> SimulationResult:
        """응답 속도 변화 시 친밀도 예측"""
        prompt = get_simulation_prompt(
            analysis.model_dump(mode="json"),
            response_time_percentage,
            RelationshipMode(mode).value,
            language
        )
        data = self._parse_json(await self._complete(prompt))
        try:
            return SimulationResult.model_validate(data)
        except ValidationError as e:
            raise AnalysisMalformed(str(e)) from e

    async def analyze_self(self, all_conversations: str) -> SelfAnalysisResult:
        """모든 인물과의 대화를 합쳐 사용자 본인의 대화 스타일 분석"""
        if not all_conversations.strip():
            raise InputInvalid("no conversations to analyze")

        data = self._parse_json(await self._complete(get_self_analysis_prompt(all_conversations)))
        # 값이 없거나 범위를 벗어나면 0-100 으로 보정
        return SelfAnalysisResult(
            initiative=clamp_score(data.get("initiative")),
            emotion=clamp_score(data.get("emotion")),
            expression=clamp_score(data.get("expression")),
            tempo=clamp_score(data.get("tempo")),
        )


# 인스턴스
analysis_chain = AnalysisChain()
