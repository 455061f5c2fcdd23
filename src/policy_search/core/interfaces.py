"""
Интерфейсы (абстрактные классы) поискового движка
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Iterable, Dict, Any
from .models import Document, SearchQuery, SearchResult


class IQueryProcessor(ABC):
    """Интерфейс обработчика текста"""

    @abstractmethod
    def process(self, query: str) -> SearchQuery:
        """
        Обработать поисковый запрос

        Этапы:
        1. Нормализация (lowercase, удаление спецсимволов)
        2. Токенизация
        3. Удаление стоп-слов
        4. Стемминг
        """
        pass

    @abstractmethod
    def normalize(self, text: str) -> str:
        """Нормализация текста"""
        pass

    @abstractmethod
    def tokenize(self, text: str) -> List[str]:
        """Разбить на нормализованные термы"""
        pass


class IIndexer(ABC):
    """Интерфейс индексатора"""

    @abstractmethod
    def build_index(self, documents: Iterable[Document]) -> int:
        """
        Полная переиндексация

        Returns:
            Количество проиндексированных (активных) документов
        """
        pass

    @abstractmethod
    def upsert(self, document: Document) -> None:
        """Добавить или обновить один документ"""
        pass

    @abstractmethod
    def remove(self, document_id: int) -> bool:
        """Удалить документ из индекса"""
        pass


class ISearchEngine(ABC):
    """Интерфейс поискового движка"""

    @abstractmethod
    def search(
        self,
        query: str,
        limit: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> SearchResult:
        """
        Выполнить поиск документов

        Args:
            query: Поисковый запрос
            limit: Количество результатов
            filters: Фильтры (document_type, category)

        Returns:
            SearchResult с документами и объяснениями совпадений
        """
        pass


class IDocumentStore(ABC):
    """Интерфейс хранилища документов"""

    @abstractmethod
    def list_active(self) -> List[Document]:
        """Все активные документы (снимок для индексации)"""
        pass

    @abstractmethod
    def get(self, document_id: int) -> Document:
        pass

    @abstractmethod
    def create(self, document: Document) -> Document:
        pass

    @abstractmethod
    def update(self, document_id: int, updates: Dict[str, Any]) -> Document:
        pass

    @abstractmethod
    def delete(self, document_id: int) -> None:
        pass
