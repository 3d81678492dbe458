# itda/services/history_aggregator.py
"""
누적 대화 기록 병합

새 대화를 인물의 기존 기록에 합치고, 분석 엔진에 넘길 문자열을 만든다.
부수효과 없음: 저장은 호출하는 쪽에서 history/analysis 를 한 번에 기록한다.
"""

from typing import Iterable, List, Optional, Tuple

from itda.errors import InputInvalid, NameCollision
from itda.schemas.person_schemas import PersonRecord
from itda.utils.logger import logger

# 대화 블록 구분자. 대화 내용 안에 같은 문자열이 있어도 이스케이프하지 않는다.
HISTORY_SEPARATOR = "\n\n---\n\n"


def join_history(history: Iterable[str]) -> str:
    return HISTORY_SEPARATOR.join(history)


def validate_submission(person_name: str, transcript: str):
    if not person_name or not person_name.strip():
        raise InputInvalid("person name is empty")
    if not transcript or not transcript.strip():
        raise InputInvalid("transcript is empty")


def merge_history(
    person_name: str,
    new_transcript: str,
    is_new_person: bool,
    existing_history: Optional[List[str]],
) -> Tuple[List[str], str]:
    """
    새 대화를 기존 기록에 병합

    existing_history 가 None 이면 기록이 없는 인물로 본다.
    - 새 인물 모드: 기록이 있으면 NameCollision (덮어쓰기 금지)
    - 추가 모드: 기록이 없으면 생성으로 처리 (데이터 유실 방지)

    Returns:
        (updated_history, analysis_input_text)
    """
    validate_submission(person_name, new_transcript)

    if is_new_person:
        if existing_history is not None:
            raise NameCollision(f"person '{person_name}' already exists")
        updated_history = [new_transcript]
    elif existing_history is None:
        logger.info(f" 추가 대상 인물 없음 → 신규 생성으로 처리: '{person_name}'")
        updated_history = [new_transcript]
    else:
        updated_history = list(existing_history) + [new_transcript]

    return updated_history, join_history(updated_history)


def collect_self_history(records: Iterable[PersonRecord]) -> str:
    """자기 분석용: 모든 인물의 누적 대화를 인물별 블록으로 합침"""
    blocks = []
    for record in records:
        if not record.history:
            continue
        blocks.append(f"[{record.name}]\n{join_history(record.history)}")
    return HISTORY_SEPARATOR.join(blocks)
