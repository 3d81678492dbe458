"""
It-Da Relationship Analysis Service

대화 기록 기반 관계 분석 + RAG 상담 서비스
- 인물별 누적 대화 기록 병합
- AI 관계 분석 (친밀도/감정/균형)
- 인간관계론 지식 기반 상담 챗봇
"""

__version__ = "1.0.0"
__author__ = "It-Da Team"
