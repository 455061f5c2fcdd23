"""
Индексатор документов

Строит инвертированный индекс (терм -> вхождения по полям документов)
и публикует его целиком заменой ссылки.
"""
import logging
import threading
import time
from typing import List, Dict, Set, Iterable, Optional, Tuple

from ..core.models import Document, Posting, INDEXED_FIELDS
from ..core.interfaces import IIndexer
from .query_processor import QueryProcessor

logger = logging.getLogger(__name__)

_FIELD_ORDER = {f: i for i, f in enumerate(INDEXED_FIELDS)}


def _posting_key(posting: Posting) -> Tuple[int, int]:
    return posting.document_id, _FIELD_ORDER[posting.field]


class InvertedIndex:
    """
    Снимок инвертированного индекса

    После публикации не изменяется: поиск читает его без блокировок.
    Документы хранятся копиями, вхождения ссылаются на них только по id.
    """

    def __init__(
        self,
        postings: Optional[Dict[str, List[Posting]]] = None,
        documents: Optional[Dict[int, Document]] = None,
        doc_terms: Optional[Dict[int, Set[str]]] = None,
    ):
        self.postings = postings if postings is not None else {}
        self.documents = documents if documents is not None else {}
        self.doc_terms = doc_terms if doc_terms is not None else {}
        self._vocabulary = None

    @property
    def document_count(self) -> int:
        return len(self.documents)

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        """Отсортированный словарь термов"""
        if self._vocabulary is None:
            self._vocabulary = tuple(sorted(self.postings))
        return self._vocabulary

    def get_postings(self, term: str) -> List[Posting]:
        return self.postings.get(term, [])

    def document_frequency(self, term: str) -> int:
        """Число разных документов с термом"""
        return len({p.document_id for p in self.get_postings(term)})

    def get_document(self, document_id: int) -> Optional[Document]:
        return self.documents.get(document_id)

    def __contains__(self, term: str) -> bool:
        return term in self.postings

    def __len__(self) -> int:
        return len(self.postings)


class Indexer(IIndexer):
    """
    Индексатор документов

    Состояния: не построен (index is None) и построен.
    Запись (полная сборка, upsert, remove) сериализуется одной блокировкой,
    каждый раз собирается новый снимок и публикуется присваиванием.
    """

    def __init__(self, query_processor: Optional[QueryProcessor] = None):
        self.query_processor = query_processor or QueryProcessor()
        self._index: Optional[InvertedIndex] = None
        self._write_lock = threading.Lock()

    @property
    def index(self) -> Optional[InvertedIndex]:
        return self._index

    @property
    def is_built(self) -> bool:
        return self._index is not None

    def build_index(self, documents: Iterable[Document]) -> int:
        """Полная индексация активных документов"""
        start_time = time.time()

        with self._write_lock:
            snapshot = {}
            for document in documents:
                if document.id in snapshot:
                    logger.warning(f"[Indexer] Duplicate document id {document.id}, keeping the last one")
                snapshot[document.id] = document

            postings: Dict[str, List[Posting]] = {}
            stored: Dict[int, Document] = {}
            doc_terms: Dict[int, Set[str]] = {}

            # Порядок документов по id - для детерминированных списков вхождений
            for document_id in sorted(snapshot):
                document = snapshot[document_id]
                if not document.active:
                    continue

                document_postings = self._index_document(document)
                for term, term_postings in document_postings.items():
                    postings.setdefault(term, []).extend(term_postings)

                stored[document_id] = document.copy()
                doc_terms[document_id] = set(document_postings)

            self._index = InvertedIndex(postings, stored, doc_terms)

        took_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"[Indexer] Built index: {len(stored)} active of {len(snapshot)} documents, "
            f"{len(postings)} terms, {took_ms} ms"
        )
        return len(stored)

    def upsert(self, document: Document) -> None:
        """
        Добавить или обновить документ

        Затрагивает только термы этого документа. Неактивный документ
        удаляется из индекса.
        """
        if not document.active:
            self.remove(document.id)
            return

        with self._write_lock:
            current = self._index if self._index is not None else InvertedIndex()
            document_postings = self._index_document(document)

            old_terms = current.doc_terms.get(document.id, set())
            new_terms = set(document_postings)

            postings = self._without_document(current, document.id, old_terms | new_terms)
            for term, term_postings in document_postings.items():
                merged = postings.get(term, []) + term_postings
                merged.sort(key=_posting_key)
                postings[term] = merged

            documents = dict(current.documents)
            documents[document.id] = document.copy()
            doc_terms = dict(current.doc_terms)
            doc_terms[document.id] = new_terms

            self._index = InvertedIndex(postings, documents, doc_terms)

        logger.info(f"[Indexer] Upserted document {document.id}: {len(new_terms)} terms")

    def remove(self, document_id: int) -> bool:
        """Удалить документ из индекса"""
        with self._write_lock:
            current = self._index
            if current is None or document_id not in current.documents:
                logger.debug(f"[Indexer] Document {document_id} not in index, nothing to remove")
                return False

            old_terms = current.doc_terms.get(document_id, set())
            postings = self._without_document(current, document_id, old_terms)

            documents = dict(current.documents)
            del documents[document_id]
            doc_terms = dict(current.doc_terms)
            doc_terms.pop(document_id, None)

            self._index = InvertedIndex(postings, documents, doc_terms)

        logger.info(f"[Indexer] Removed document {document_id}: {len(old_terms)} terms touched")
        return True

    def _index_document(self, document: Document) -> Dict[str, List[Posting]]:
        """
        Вхождения одного документа: терм -> [Posting по полям]

        Позиции считаются внутри каждого поля с нуля.
        """
        by_term: Dict[str, List[Posting]] = {}

        for f in INDEXED_FIELDS:
            field_postings: Dict[str, Posting] = {}
            tokens = self.query_processor.tokenize(document.field_text(f))

            for position, term in enumerate(tokens):
                posting = field_postings.get(term)
                if posting is None:
                    posting = Posting(document_id=document.id, field=f)
                    field_postings[term] = posting
                    by_term.setdefault(term, []).append(posting)
                posting.add(position)

        return by_term

    @staticmethod
    def _without_document(
        current: InvertedIndex,
        document_id: int,
        terms: Set[str],
    ) -> Dict[str, List[Posting]]:
        """
        Копия словаря вхождений без документа

        Списки пересобираются только для затронутых термов, но сам словарь
        копируется целиком: upsert и remove стоят O(размер словаря).
        """
        postings = dict(current.postings)

        for term in terms:
            remaining = [p for p in postings.get(term, []) if p.document_id != document_id]
            if remaining:
                postings[term] = remaining
            else:
                postings.pop(term, None)

        return postings
