from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid

from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings
from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    MatchValue,
    PointStruct,
    VectorParams,
)

from itda.config import settings
from itda.errors import EmbeddingUnavailable, RetrievalUnavailable
from itda.schemas.counsel_schemas import RetrievedPassage
from itda.utils.logger import logger


class EmbeddingGateway:
    """질문 텍스트 → 고정 차원 벡터"""

    def __init__(self, embeddings: Optional[Embeddings] = None, dimensions: Optional[int] = None):
        self.dimensions = dimensions or settings.embedding_dimensions
        self.embeddings = embeddings or OpenAIEmbeddings(
            model=settings.embedding_model,
            dimensions=self.dimensions,
            openai_api_key=settings.openai_api_key
        )

    async def embed(self, text: str) -> List[float]:
        try:
            vector = await self.embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f" 임베딩 실패: {e}")
            raise EmbeddingUnavailable(str(e)) from e

        if not vector or len(vector) != self.dimensions:
            size = len(vector) if vector else 0
            logger.error(f" 임베딩 차원 불일치: expected={self.dimensions}, got={size}")
            raise EmbeddingUnavailable(f"expected {self.dimensions}-dim embedding, got {size}")
        return list(vector)


class VectorIndex:
    """상담 지식 베이스 (Qdrant 컬렉션)"""

    TEXT_KEY = "text"

    def __init__(self, client: Optional[AsyncQdrantClient] = None, collection_name: Optional[str] = None):
        self.client = client or AsyncQdrantClient(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key
        )
        self.collection_name = collection_name or settings.knowledge_collection

    async def query(self, vector: List[float], top_k: int = 3, include_metadata: bool = True) -> List[RetrievedPassage]:
        """유사도 상위 top_k 구절 (순위 순서 유지)"""
        try:
            response = await self.client.query_points(
                collection_name=self.collection_name,
                query=vector,
                limit=top_k,
                with_payload=include_metadata
            )
        except Exception as e:
            logger.error(f" 지식 검색 실패: {e}")
            raise RetrievalUnavailable(str(e)) from e

        passages = []
        for point in response.points:
            payload = point.payload or {}
            passages.append(RetrievedPassage(
                text=payload.get(self.TEXT_KEY) or "",
                score=point.score,
                metadata=payload
            ))
        logger.info(f" {self.collection_name} 검색 결과: {len(passages)}개")
        return passages

    async def ensure_collection(self, dimensions: Optional[int] = None):
        if await self.client.collection_exists(self.collection_name):
            return
        await self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config=VectorParams(
                size=dimensions or settings.embedding_dimensions,
                distance=Distance.COSINE
            )
        )
        logger.info(f" 컬렉션 생성: {self.collection_name}")

    async def upsert_passages(self, items: List[Dict[str, Any]]) -> int:
        """items: {"text", "vector", "source", "metadata"} 목록"""
        points = []
        for item in items:
            payload = dict(item.get("metadata") or {})
            payload.update({
                self.TEXT_KEY: item["text"],
                "source": item.get("source", ""),
                "created_at": datetime.utcnow().isoformat()
            })
            points.append(PointStruct(id=str(uuid.uuid4()), vector=item["vector"], payload=payload))

        if not points:
            return 0
        try:
            await self.client.upsert(collection_name=self.collection_name, points=points)
        except Exception as e:
            logger.error(f" 지식 저장 실패: {e}")
            raise RetrievalUnavailable(str(e)) from e
        logger.info(f" 지식 저장 완료: {len(points)}개 → {self.collection_name}")
        return len(points)

    async def delete_by_source(self, source: str):
        try:
            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=FilterSelector(
                    filter=Filter(must=[FieldCondition(key="source", match=MatchValue(value=source))])
                )
            )
        except Exception as e:
            logger.error(f" 지식 삭제 실패: {e}")
            raise RetrievalUnavailable(str(e)) from e
        logger.info(f" 지식 삭제 완료: source={source}")


class KnowledgeService:
    """지식 구절 임베딩 + 저장"""

    def __init__(self, embedding_gateway: Optional[EmbeddingGateway] = None, vector_index: Optional[VectorIndex] = None):
        self.embedding_gateway = embedding_gateway or EmbeddingGateway()
        self.vector_index = vector_index or VectorIndex()

    async def store_passages(self, passages: List[Dict[str, Any]]) -> int:
        await self.vector_index.ensure_collection(self.embedding_gateway.dimensions)
        items = []
        for passage in passages:
            text = (passage.get("text") or "").strip()
            if not text:
                continue
            items.append({
                "text": text,
                "vector": await self.embedding_gateway.embed(text),
                "source": passage.get("source", ""),
                "metadata": passage.get("metadata")
            })
        return await self.vector_index.upsert_passages(items)

    async def delete_source(self, source: str):
        await self.vector_index.delete_by_source(source)


# 전역 인스턴스
embedding_gateway = EmbeddingGateway()
vector_index = VectorIndex()
knowledge_service = KnowledgeService(embedding_gateway, vector_index)
