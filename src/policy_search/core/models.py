"""
Модели данных поискового движка
"""
from dataclasses import dataclass, field, replace
from typing import Optional, List
from enum import Enum


class Field(Enum):
    NAME = "name"
    DESCRIPTION = "description"
    CATEGORY = "category"
    TAGS = "tags"
    CONTENT = "content"


# Веса полей по умолчанию
FIELD_WEIGHTS = {
    Field.NAME: 3.0,
    Field.CATEGORY: 2.5,
    Field.DESCRIPTION: 2.0,
    Field.TAGS: 2.0,
    Field.CONTENT: 1.0,
}

# Порядок индексации полей документа
INDEXED_FIELDS = (
    Field.NAME,
    Field.DESCRIPTION,
    Field.CONTENT,
    Field.CATEGORY,
    Field.TAGS,
)


class DocumentType(Enum):
    POLICY = "policy"
    ONBOARDING = "onboarding"


@dataclass
class Document:
    """Документ (политика или материал онбординга)"""
    id: int
    name: str
    content: str = ""
    description: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    active: bool = True
    document_type: str = DocumentType.POLICY.value
    created_by: Optional[str] = None

    def field_text(self, f: Field) -> str:
        """Текст поля для индексации"""
        if f is Field.TAGS:
            return " ".join(self.tags)
        return getattr(self, f.value) or ""

    def copy(self) -> "Document":
        """Отдельная копия, не связанная с хранилищем"""
        return replace(self, tags=list(self.tags))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "content": self.content,
            "is_active": self.active,
            "document_type": self.document_type,
            "created_by": self.created_by,
        }


@dataclass
class Posting:
    """Вхождение терма в поле документа"""
    document_id: int
    field: Field
    frequency: int = 0
    positions: List[int] = field(default_factory=list)

    def add(self, position: int):
        self.positions.append(position)
        self.frequency += 1


@dataclass
class SearchQuery:
    """Обработанный поисковый запрос"""
    raw_query: str
    normalized_query: str = ""
    tokens: List[str] = field(default_factory=list)


@dataclass
class Match:
    """Объяснение совпадения для UI"""
    document_id: int
    field: Field
    term: str
    score: float
    matched_term: str = ""
    distance: int = 0

    @property
    def fuzzy(self) -> bool:
        return self.distance > 0

    def to_dict(self) -> dict:
        return {
            "document_id": self.document_id,
            "field": self.field.value,
            "text": self.term,
            "matched_term": self.matched_term or self.term,
            "distance": self.distance,
            "score": round(self.score, 4),
        }


@dataclass
class DocumentMatch:
    """Документ в выдаче со скором и совпадениями"""
    document: Document
    score: float
    matches: List[Match] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "document": self.document.to_dict(),
            "score": round(self.score, 4),
            "matches": [m.to_dict() for m in self.matches],
        }


@dataclass
class SearchResult:
    """Результат поиска"""
    query: str
    total: int
    items: List[DocumentMatch]
    tokens: List[str] = field(default_factory=list)
    fuzzy_terms: List[str] = field(default_factory=list)
    took_ms: int = 0


@dataclass
class PolicySearchAnswer:
    """Ответ чат-бота в режиме поиска политик"""
    response: str
    documents: List[Document]
    type: str = "policy_search"
