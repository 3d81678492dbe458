"""
SQLAlchemy Base 설정
"""

from datetime import datetime, timezone, timedelta
from sqlalchemy.orm import declarative_base

# 공통 시간대 (한국 시간)
KST = timezone(timedelta(hours=9))

def now_kst():
    return datetime.now(KST)

def as_kst(value):
    """DATETIME 컬럼은 시간대 없이 KST 로 저장됨: 읽을 때 KST 를 붙여 생성 직후 값과 같은 형태로 맞춤"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=KST)

# Base 모델
Base = declarative_base()
