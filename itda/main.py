# itda/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from itda.api import chat, persons, counsel, admin
from itda.services.database_service import database_service
from itda.utils.logger import setup_logger
from itda.config import settings
from itda import __version__
import uvicorn

# 로거 설정
logger = setup_logger()

app = FastAPI(
    title="It-Da Relationship Analysis Service",
    description="누적 대화 기반 관계 분석 + RAG 상담 서비스",
    version=__version__,
    debug=settings.debug
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 실제 배포시에는 특정 도메인으로 제한
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    """앱 시작시 초기화"""
    logger.info(" It-Da Service 시작")
    logger.info(f" Debug 모드: {settings.debug}")
    logger.info(f" 지식 컬렉션: {settings.knowledge_collection} ({settings.embedding_dimensions}차원)")

    # 데이터베이스 테이블 생성 (필요시)
    try:
        await database_service.create_tables()
        logger.info("🗄️ 데이터베이스 초기화 완료")
    except Exception as e:
        logger.warning(f" 데이터베이스 초기화 실패: {e}")

@app.on_event("shutdown")
async def shutdown_event():
    """앱 종료시 정리"""
    logger.info(" It-Da Service 종료")
    await database_service.close()

# 라우터 등록
app.include_router(chat.router, prefix="/api")
app.include_router(persons.router, prefix="/api")
app.include_router(counsel.router, prefix="/api")
app.include_router(admin.router, prefix="/api")

@app.get("/")
async def root():
    return {
        "service": "It-Da Relationship Analysis Service",
        "version": __version__,
        "status": "running",
        "features": [
            "누적 대화 병합 분석",
            "AI 관계 분석 (친밀도/감정/균형)",
            "인간관계론 RAG 상담",
            "응답 속도 시뮬레이션",
            "자기 대화 스타일 분석"
        ]
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "knowledge_collection": settings.knowledge_collection,
        "embedding": {
            "model": settings.embedding_model,
            "dimensions": settings.embedding_dimensions
        },
        "models": {
            "chat": settings.chat_model,
            "analysis": settings.analysis_model
        }
    }

if __name__ == "__main__":
    uvicorn.run(
        "itda.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
