"""
Core модуль - модели, интерфейсы, конфигурация
"""
from .models import (
    Field,
    FIELD_WEIGHTS,
    INDEXED_FIELDS,
    DocumentType,
    Document,
    Posting,
    SearchQuery,
    Match,
    DocumentMatch,
    SearchResult,
    PolicySearchAnswer,
)

from .interfaces import (
    IQueryProcessor,
    IIndexer,
    ISearchEngine,
    IDocumentStore,
)

from .exceptions import (
    SearchError,
    SearchCancelledError,
    DocumentNotFoundError,
)

from .config import Config, SearchConfig, ApiConfig, config

__all__ = [
    # Models
    "Field",
    "FIELD_WEIGHTS",
    "INDEXED_FIELDS",
    "DocumentType",
    "Document",
    "Posting",
    "SearchQuery",
    "Match",
    "DocumentMatch",
    "SearchResult",
    "PolicySearchAnswer",

    # Interfaces
    "IQueryProcessor",
    "IIndexer",
    "ISearchEngine",
    "IDocumentStore",

    # Exceptions
    "SearchError",
    "SearchCancelledError",
    "DocumentNotFoundError",

    # Config
    "Config",
    "SearchConfig",
    "ApiConfig",
    "config",
]
