"""
사용자 노출용 오류 메시지 (ko/en)
"""

from typing import Optional

DEFAULT_LANGUAGE = "ko"

ERROR_MESSAGES = {
    "input_invalid": {
        "ko": "입력값을 확인해주세요. 이름과 대화 내용은 비워둘 수 없어요.",
        "en": "Please check your input. Name and conversation text cannot be empty.",
    },
    "person_not_found": {
        "ko": "해당 인물의 기록을 찾을 수 없어요.",
        "en": "No record was found for this person.",
    },
    "name_collision": {
        "ko": "이미 같은 이름의 인물이 있어요. 기존 인물에 대화를 추가하거나 다른 이름을 사용해주세요.",
        "en": "A person with this name already exists. Add to the existing person or choose another name.",
    },
    "concurrent_modification": {
        "ko": "다른 곳에서 이 인물의 기록이 먼저 수정되었어요. 새로고침 후 다시 시도해주세요.",
        "en": "This person's record was changed elsewhere. Refresh and try again.",
    },
    "embedding_unavailable": {
        "ko": "질문을 분석하지 못했어요. 잠시 후 다시 시도해주세요.",
        "en": "We couldn't process your question. Please try again later.",
    },
    "retrieval_unavailable": {
        "ko": "상담 자료를 불러오지 못했어요. 잠시 후 다시 시도해주세요.",
        "en": "We couldn't load counseling references. Please try again later.",
    },
    "generation_unavailable": {
        "ko": "상담 답변 생성에 실패했어요. 잠시 후 다시 시도해주세요.",
        "en": "Failed to generate an answer. Please try again later.",
    },
    "analysis_malformed": {
        "ko": "AI 분석 결과 형식이 올바르지 않아요. 다시 분석해주세요.",
        "en": "The AI returned an invalid analysis. Please run the analysis again.",
    },
    "store_offline": {
        "ko": "저장소에 연결할 수 없어요. 네트워크 상태를 확인하고 잠시 후 다시 시도해주세요.",
        "en": "Storage is unreachable. Check your connection and try again later.",
    },
    "store_permission": {
        "ko": "저장소 접근 권한이 없어요. 로그인 상태와 권한을 확인해주세요.",
        "en": "Access to storage was denied. Check your sign-in and permissions.",
    },
    "store_not_provisioned": {
        "ko": "저장소가 아직 준비되지 않았어요. 관리자에게 문의해주세요.",
        "en": "Storage has not been set up yet. Please contact the administrator.",
    },
    "internal_error": {
        "ko": "서버 에러 발생",
        "en": "Internal server error",
    },
}


def normalize_language(language: Optional[str]) -> str:
    """'en-US,en;q=0.9' 같은 값도 ko/en 으로 정리"""
    if not language:
        return DEFAULT_LANGUAGE
    return "en" if language.strip().lower().startswith("en") else "ko"


def get_message(key: str, language: Optional[str] = None) -> str:
    messages = ERROR_MESSAGES.get(key, ERROR_MESSAGES["internal_error"])
    return messages[normalize_language(language)]
