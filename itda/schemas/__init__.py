# itda/schemas/__init__.py
"""
스키마 패키지
순환 import 방지를 위해 자주 쓰는 것만 노출
"""

from .commons_schemas import BaseResponse, ErrorDetail
from .analysis_schemas import AnalysisResult, RelationshipMode

# 나머지는 각 모듈에서 직접 import
# from .person_schemas import PersonRecord, StoredAnalysis, TranscriptRequest
# from .counsel_schemas import ChatRequest, ChatResponse, CounselAnswer
# from .knowledge_schemas import KnowledgeStoreRequest
