"""
도메인 오류 정의

모든 오류는 ItdaError 를 상속하며, code 로 사용자 메시지를 찾는다.
"""

from typing import Optional

from itda.utils.messages import get_message


class ItdaError(Exception):
    code = "internal_error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.code)
        self.detail = detail

    @property
    def message_key(self) -> str:
        return self.code

    def user_message(self, language: Optional[str] = None) -> str:
        return get_message(self.message_key, language)


class InputInvalid(ItdaError):
    code = "input_invalid"


class PersonNotFound(ItdaError):
    code = "person_not_found"


class NameCollision(ItdaError):
    """새 인물 생성 요청인데 같은 이름의 기록이 이미 있음"""
    code = "name_collision"


class ConcurrentModification(ItdaError):
    """버전 불일치 (다른 요청이 먼저 기록을 갱신함)"""
    code = "concurrent_modification"


class EmbeddingUnavailable(ItdaError):
    code = "embedding_unavailable"


class RetrievalUnavailable(ItdaError):
    code = "retrieval_unavailable"


class GenerationUnavailable(ItdaError):
    code = "generation_unavailable"


class AnalysisMalformed(ItdaError):
    code = "analysis_malformed"


class StoreUnavailable(ItdaError):
    code = "store_unavailable"

    OFFLINE = "offline"
    PERMISSION = "permission"
    NOT_PROVISIONED = "not_provisioned"

    def __init__(self, detail: str = "", kind: str = OFFLINE):
        super().__init__(detail)
        self.kind = kind

    @property
    def message_key(self) -> str:
        return f"store_{self.kind}"
