from fastapi import APIRouter, HTTPException

from itda.api.errors import to_http_exception
from itda.errors import ItdaError
from itda.schemas.knowledge_schemas import (
    KnowledgeDeleteRequest,
    KnowledgeDeleteResponse,
    KnowledgeStoreRequest,
    KnowledgeStoreResponse,
)
from itda.services.rag_service import knowledge_service
from itda.utils.logger import logger

router = APIRouter(tags=["admin"])


@router.post("/admin/knowledge", response_model=KnowledgeStoreResponse)
async def store_knowledge(request: KnowledgeStoreRequest):
    try:
        logger.info(f" 지식 저장 요청: {len(request.passages)}개")

        stored_count = await knowledge_service.store_passages(
            [passage.model_dump() for passage in request.passages]
        )

        return KnowledgeStoreResponse(
            status="stored",
            stored_count=stored_count,
            collection=knowledge_service.vector_index.collection_name
        )

    except ItdaError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f" 지식 저장 실패: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/admin/knowledge/delete", response_model=KnowledgeDeleteResponse)
async def delete_knowledge(request: KnowledgeDeleteRequest):
    try:
        logger.info(f"🗑️ 지식 삭제 요청: source={request.source}")

        await knowledge_service.delete_source(request.source)

        return KnowledgeDeleteResponse(
            status="deleted",
            collection=knowledge_service.vector_index.collection_name,
            source=request.source,
            message=f"{request.source} 지식이 삭제되었습니다."
        )

    except ItdaError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f" 지식 삭제 실패: {e}")
        raise HTTPException(status_code=500, detail=str(e))
