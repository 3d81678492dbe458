from qdrant_client import QdrantClient
from qdrant_client.http.models import VectorParams, Distance
from dotenv import load_dotenv
import os

# .env에서 환경 변수 로딩
load_dotenv()

QDRANT_URL = os.getenv("QDRANT_URL")
QDRANT_API_KEY = os.getenv("QDRANT_API_KEY")
KNOWLEDGE_COLLECTION = os.getenv("KNOWLEDGE_COLLECTION", "relationship_knowledge")

# 벡터 크기 (text-embedding-3-small 을 768차원으로 축소해서 사용)
VECTOR_SIZE = int(os.getenv("EMBEDDING_DIMENSIONS", "768"))

client = QdrantClient(
    url=QDRANT_URL,
    api_key=QDRANT_API_KEY,
)

# 존재하면 삭제 후 재생성
if client.collection_exists(KNOWLEDGE_COLLECTION):
    client.delete_collection(KNOWLEDGE_COLLECTION)
    print(f"🗑️ Deleted existing: {KNOWLEDGE_COLLECTION}")

client.create_collection(
    collection_name=KNOWLEDGE_COLLECTION,
    vectors_config=VectorParams(
        size=VECTOR_SIZE,
        distance=Distance.COSINE
    )
)
print(f" Created: {KNOWLEDGE_COLLECTION} ({VECTOR_SIZE}d)")
