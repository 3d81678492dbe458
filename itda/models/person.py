"""
인물 기록 모델

한 행에 누적 대화(HISTORY), 최신 분석(ANALYSIS), 상담 메시지(COUNSEL_MESSAGES)를
함께 저장한다. 삭제는 행 단위로 이루어지므로 세 필드가 함께 사라진다.
"""

from sqlalchemy import Column, String, DateTime, Integer, JSON
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects import mysql

from .base import Base, now_kst

# 인물 이름은 대소문자를 구분하는 키 (MySQL 기본 collation 은 구분하지 않음)
CaseSensitiveName = String(100).with_variant(
    mysql.VARCHAR(100, charset="utf8mb4", collation="utf8mb4_bin"), "mysql"
)


class Person(Base):
    __tablename__ = "person_TB"

    OWNER_ID = Column(String(128), primary_key=True)
    PERSON_NAME = Column(CaseSensitiveName, primary_key=True)
    MODE = Column(SQLEnum('WORK', 'ROMANCE', 'FRIEND', 'OTHER', name="relationship_mode"), nullable=False)
    HISTORY = Column(JSON, nullable=False)
    ANALYSIS = Column(JSON, nullable=False)
    COUNSEL_MESSAGES = Column(JSON, nullable=False, default=list)
    VERSION = Column(Integer, nullable=False, default=1)
    COUNSEL_VERSION = Column(Integer, nullable=False, default=0)
    CREATED_AT = Column(DateTime, default=now_kst, nullable=False)
    UPDATED_AT = Column(DateTime, default=now_kst, nullable=False)
