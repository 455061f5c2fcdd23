"""
FastAPI приложение - документы, поиск, чат-бот по политикам
"""
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional, List
from contextlib import asynccontextmanager
from pydantic import BaseModel
import logging

from ..core.config import config
from ..core.exceptions import DocumentNotFoundError, SearchCancelledError
from ..core.models import Document, DocumentType
from ..search.indexer import Indexer
from ..search.engine import SearchEngine
from .storage import DocumentStore

logger = logging.getLogger(__name__)


# Глобальные объекты
document_store = None
indexer = None
search_engine = None


GENERAL_RESPONSE = "I can help you with IT security onboarding or policy searches. What would you like to know?"
ONBOARDING_RESPONSE = (
    "Welcome to IT Security onboarding! I can help you with topics like passwords, VPN access, "
    "email security, and data protection. What would you like to learn about?"
)
DOCUMENT_TYPE_ERROR = "Document type must be 'policy' or 'onboarding'"


def _on_document_changed(event: str, document: Document):
    """Индекс следует за хранилищем: неактивные документы из него удаляются"""
    indexer.upsert(document)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Инициализация и очистка ресурсов"""
    global document_store, indexer, search_engine

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    document_store = DocumentStore()
    indexer = Indexer()
    search_engine = SearchEngine(indexer, settings=config.search)

    if config.seed_demo_documents:
        document_store.seed()

    # Стартовая сборка, дальше - инкрементально по событиям хранилища
    with document_store.lock:
        search_engine.rebuild(document_store.list_active())
        document_store.subscribe(_on_document_changed)

    logger.info("[API] Policy search service initialized")

    yield

    logger.info("[API] Policy search service stopped")


# Создание приложения
app = FastAPI(
    title="Policy Search API",
    description="API поиска по политикам и документам компании",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============ MODELS ============

class DocumentCreate(BaseModel):
    name: str
    content: str
    category: str
    document_type: str
    description: str = ""
    tags: List[str] = []
    created_by: Optional[str] = None


class DocumentUpdate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    document_type: Optional[str] = None
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ChatRequest(BaseModel):
    message: str
    type: str = "policy_search"  # policy_search | onboarding


def _check_document_type(document_type: Optional[str]):
    valid = {t.value for t in DocumentType}
    if document_type is not None and document_type not in valid:
        raise HTTPException(status_code=400, detail=DOCUMENT_TYPE_ERROR)


# ============ DOCUMENTS ENDPOINTS ============

@app.get("/api/v1/documents")
async def list_documents(
    type: Optional[str] = Query(None, description="policy или onboarding"),
    category: Optional[str] = None,
    active: bool = False,
):
    """Список документов с фильтрами"""
    documents = document_store.list(document_type=type, category=category, active_only=active)
    return [d.to_dict() for d in documents]


@app.get("/api/v1/documents/search")
def search_documents(
    q: Optional[str] = Query(None, description="Поисковый запрос"),
    limit: int = Query(20, description="Количество результатов"),
    type: Optional[str] = None,
    category: Optional[str] = None,
):
    """Поиск по документам для админки"""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    filters = {}
    if type:
        filters["document_type"] = type
    if category:
        filters["category"] = category

    try:
        result = search_engine.search(q, limit=limit, filters=filters)
    except SearchCancelledError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "documents": [item.document.to_dict() for item in result.items],
        "total": len(result.items),
        "query": q,
        "matches": [item.to_dict() for item in result.items],
        "meta": {
            "took_ms": result.took_ms,
            "tokens": result.tokens,
            "fuzzy_terms": result.fuzzy_terms,
        }
    }


@app.get("/api/v1/documents/{document_id}")
async def get_document(document_id: int):
    """Получение документа"""
    try:
        return document_store.get(document_id).to_dict()
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Document not found")


@app.post("/api/v1/documents", status_code=201)
async def create_document(data: DocumentCreate):
    """Создание документа"""
    _check_document_type(data.document_type)

    document = document_store.create(Document(
        id=0,
        name=data.name,
        content=data.content,
        description=data.description,
        category=data.category,
        document_type=data.document_type,
        tags=data.tags,
        created_by=data.created_by,
    ))
    return document.to_dict()


@app.put("/api/v1/documents/{document_id}")
async def update_document(document_id: int, data: DocumentUpdate):
    """Обновление документа (только переданные поля)"""
    _check_document_type(data.document_type)

    updates = data.model_dump(exclude_none=True)
    if "is_active" in updates:
        updates["active"] = updates.pop("is_active")

    try:
        return document_store.update(document_id, updates).to_dict()
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Document not found")


@app.delete("/api/v1/documents/{document_id}")
async def delete_document(document_id: int):
    """Удаление документа (деактивация)"""
    try:
        document_store.delete(document_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Document not found")
    return {"message": "Document deleted successfully"}


# ============ CHAT ENDPOINT ============

@app.post("/api/v1/chat")
def chat(request: ChatRequest):
    """Чат-бот: поиск политик или онбординг"""
    try:
        if request.type == "policy_search":
            answer = search_engine.policy_search(request.message)
            return {
                "response": answer.response,
                "type": answer.type,
                "policy_files": [d.to_dict() for d in answer.documents],
            }

        if request.type == "onboarding":
            result = search_engine.search(request.message, limit=5)
            return {
                "response": ONBOARDING_RESPONSE,
                "type": "onboarding",
                "policy_files": [item.document.to_dict() for item in result.items],
            }
    except SearchCancelledError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {"response": GENERAL_RESPONSE, "type": "general", "policy_files": []}


# ============ INDEX ENDPOINTS ============

@app.post("/api/v1/index/rebuild")
def rebuild_index():
    """Полная переиндексация из хранилища"""
    # Записи ждут окончания сборки, иначе снимок перезапишет их upsert
    with document_store.lock:
        indexed = search_engine.rebuild(document_store.list_active())
    return {"success": True, "documents_indexed": indexed}


# ============ HEALTH CHECK ============

@app.get("/health")
async def health():
    """Health check"""
    index = indexer.index
    return {
        "status": "healthy",
        "index": "built" if index is not None else "unbuilt",
        "documents_indexed": index.document_count if index is not None else 0,
        "terms": len(index) if index is not None else 0,
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Policy Search API",
        "version": "1.0.0",
        "env": config.env,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "policy_search.api.main:app",
        host=config.api.host,
        port=config.api.port,
        reload=config.debug,
    )
