"""
Поисковый движок по документам
TF-IDF с весами полей и нечётким поиском для опечаток
"""
import logging
import threading
import time
from typing import List, Dict, Any, Optional, Iterable
from collections import defaultdict

from ..core.config import SearchConfig
from ..core.exceptions import SearchCancelledError
from ..core.interfaces import ISearchEngine
from ..core.models import (
    Document, DocumentMatch, Match, SearchResult, PolicySearchAnswer,
)
from .fuzzy import FuzzyMatcher
from .indexer import Indexer, InvertedIndex
from .scorer import Scorer

logger = logging.getLogger(__name__)


NO_RESULTS_RESPONSE = (
    "I couldn't find any documents matching your search. Try searching for terms like "
    "'password', 'data', 'remote work', 'onboarding', or 'incident response'."
)


class SearchEngine(ISearchEngine):
    """
    Поисковый движок

    Читает опубликованный снимок индекса:
    - точные вхождения терма запроса
    - если их нет - вхождения похожих термов (расстояние Левенштейна)
    - скор TF x IDF x вес поля, сумма по термам и полям
    """

    def __init__(
        self,
        indexer: Optional[Indexer] = None,
        settings: Optional[SearchConfig] = None,
        scorer: Optional[Scorer] = None,
        fuzzy_matcher: Optional[FuzzyMatcher] = None,
    ):
        self.settings = settings or SearchConfig()
        self.indexer = indexer or Indexer()
        self.query_processor = self.indexer.query_processor
        self.scorer = scorer or Scorer(
            field_weights=self.settings.field_weights,
            fuzzy_distance_penalty=self.settings.fuzzy_distance_penalty,
        )
        self.fuzzy_matcher = fuzzy_matcher or FuzzyMatcher(
            max_distance=self.settings.fuzzy_max_distance,
            strategy=self.settings.fuzzy_strategy,
        )

    def rebuild(self, documents: Iterable[Document]) -> int:
        """Полная переиндексация снимка документов"""
        return self.indexer.build_index(documents)

    def clamp_limit(self, limit: Optional[int]) -> int:
        if not limit or limit <= 0:
            limit = self.settings.default_limit
        return min(limit, self.settings.max_limit)

    def search(
        self,
        query: str,
        limit: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SearchResult:
        """
        Выполнить поиск документов

        Args:
            query: Поисковый запрос
            limit: Количество результатов (<= 0 или None - по умолчанию, сверху max_limit)
            filters: document_type, category
            timeout: Ограничение времени в секундах
            cancel_event: Внешний сигнал отмены

        Raises:
            SearchCancelledError: истёк таймаут или выставлен cancel_event
        """
        start_time = time.time()
        limit = self.clamp_limit(limit)

        if timeout is None:
            timeout = self.settings.search_timeout
        deadline = time.monotonic() + timeout if timeout is not None else None

        def checkpoint():
            if cancel_event is not None and cancel_event.is_set():
                raise SearchCancelledError(query, "cancelled")
            if deadline is not None and time.monotonic() > deadline:
                raise SearchCancelledError(query, f"timed out after {timeout}s")

        search_query = self.query_processor.process(query)
        tokens = search_query.tokens

        logger.info(f"[SEARCH] Query: '{search_query.raw_query}' -> tokens: {tokens}")

        # Один снимок на весь запрос
        index = self.indexer.index

        if not tokens or index is None:
            return SearchResult(
                query=search_query.raw_query,
                total=0,
                items=[],
                tokens=tokens,
                took_ms=int((time.time() - start_time) * 1000),
            )

        try:
            doc_scores, doc_matches, fuzzy_terms = self._score(index, tokens, checkpoint)
        except SearchCancelledError as e:
            logger.warning(f"[SEARCH] {e}")
            raise

        ranked = self.scorer.rank(doc_scores)
        ranked = self._apply_filters(index, ranked, filters)

        items = []
        for document_id, score in ranked[:limit]:
            items.append(DocumentMatch(
                document=index.get_document(document_id).copy(),
                score=score,
                matches=doc_matches[document_id],
            ))

        took_ms = int((time.time() - start_time) * 1000)
        logger.info(f"[SEARCH] Found {len(ranked)} documents, returning {len(items)} ({took_ms} ms)")

        return SearchResult(
            query=search_query.raw_query,
            total=len(ranked),
            items=items,
            tokens=tokens,
            fuzzy_terms=fuzzy_terms,
            took_ms=took_ms,
        )

    def policy_search(self, query: str, limit: Optional[int] = None) -> PolicySearchAnswer:
        """Ответ чат-бота в режиме поиска политик"""
        result = self.search(query, limit)
        documents = [item.document for item in result.items]

        if documents:
            response = (
                f"I found {len(documents)} document(s) related to your search with relevance scoring. "
                "Here are the most relevant documents:"
            )
        else:
            response = NO_RESULTS_RESPONSE

        return PolicySearchAnswer(response=response, documents=documents)

    def _score(self, index: InvertedIndex, tokens: List[str], checkpoint):
        """Скоры и объяснения по всем термам запроса"""
        doc_scores = defaultdict(float)
        doc_matches = defaultdict(list)
        fuzzy_terms = []

        for term in tokens:
            checkpoint()

            # Точные совпадения, иначе - похожие термы словаря
            if term in index:
                candidates = [(term, 0)]
            else:
                candidates = self.fuzzy_matcher.find(term, index, checkpoint)
                if candidates:
                    fuzzy_terms.append(term)

            logger.debug(f"[SEARCH] Term '{term}' -> {candidates}")

            for matched_term, distance in candidates:
                idf = self.scorer.idf(index, matched_term)

                for posting in index.get_postings(matched_term):
                    score = self.scorer.contribution(posting, idf, distance)
                    doc_scores[posting.document_id] += score
                    doc_matches[posting.document_id].append(Match(
                        document_id=posting.document_id,
                        field=posting.field,
                        term=term,
                        score=score,
                        matched_term=matched_term,
                        distance=distance,
                    ))

        return dict(doc_scores), doc_matches, fuzzy_terms

    @staticmethod
    def _apply_filters(index: InvertedIndex, ranked, filters: Optional[Dict[str, Any]]):
        """Фильтры по типу документа и категории"""
        if not filters:
            return ranked

        document_type = filters.get("document_type")
        category = filters.get("category")

        filtered = []
        for document_id, score in ranked:
            document = index.get_document(document_id)

            if document_type and document.document_type != document_type:
                continue

            if category and document.category.lower() != category.lower():
                continue

            filtered.append((document_id, score))

        return filtered
