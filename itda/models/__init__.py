"""
Models 패키지
SQLAlchemy 모델 정의
"""

from .base import Base, KST, as_kst, now_kst
from .person import Person

__all__ = [
    "Base",
    "KST",
    "now_kst",
    "as_kst",
    "Person",
]
