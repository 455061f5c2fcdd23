"""
Обработчик текста: нормализация, токенизация, стемминг
"""
import re
from typing import List, Set, Union, Optional

from ..core.models import SearchQuery
from ..core.interfaces import IQueryProcessor


# Английские стоп-слова по умолчанию
DEFAULT_STOPWORDS_EN = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
    "for", "of", "with", "by", "is", "are", "was", "were", "be", "been",
    "have", "has", "had", "do", "does", "did", "will", "would", "could", "should",
})

# Всё, что не буква и не цифра (подчёркивание тоже разделитель)
_SEPARATOR_RE = re.compile(r"[\W_]+")

MIN_TOKEN_LENGTH = 2


class Stemmer:
    """
    Простой стеммер для английского языка
    (одно удаление суффикса)
    """

    # Порядок важен: снимается первый подходящий суффикс, а не самый длинный
    SUFFIXES = ["ing", "ed", "er", "est", "ly", "ion", "tion", "sion", "ness", "ment"]

    def stem(self, word: str) -> str:
        """
        Получить основу слова (стем)
        """
        for suffix in self.SUFFIXES:
            if word.endswith(suffix) and len(word) - len(suffix) >= len(suffix) + 2:
                return word[:-len(suffix)]

        return word

    def stem_tokens(self, tokens: List[str]) -> List[str]:
        return [self.stem(t) for t in tokens]


class QueryProcessor(IQueryProcessor):
    """
    Обработчик текста документов и запросов

    Выполняет:
    1. Нормализацию (lowercase, удаление спецсимволов)
    2. Токенизацию
    3. Удаление стоп-слов и коротких токенов
    4. Стемминг

    Одинаково применяется к полям документов и к запросам,
    иначе термы запроса не совпадут с термами индекса.
    """

    def __init__(
        self,
        stopwords: Optional[Set[str]] = None,
        stemmer: Optional[Stemmer] = None,
    ):
        self.stopwords = stopwords if stopwords is not None else DEFAULT_STOPWORDS_EN
        self.stemmer = stemmer or Stemmer()

    def process(self, query: Union[str, bytes]) -> SearchQuery:
        """
        Полная обработка поискового запроса
        """
        raw = self._to_text(query).strip()
        normalized = self.normalize(raw)

        return SearchQuery(
            raw_query=raw,
            normalized_query=normalized,
            tokens=self._tokens_from_normalized(normalized),
        )

    def normalize(self, text: Union[str, bytes]) -> str:
        """
        Нормализация текста

        1. Приведение к нижнему регистру
        2. Замена всех не-букв и не-цифр на пробел
        3. Удаление лишних пробелов
        """
        text = self._to_text(text).lower()
        text = _SEPARATOR_RE.sub(" ", text)
        return " ".join(text.split())

    def tokenize(self, text: Union[str, bytes]) -> List[str]:
        """
        Разбиение на термы с удалением стоп-слов и стеммингом
        """
        return self._tokens_from_normalized(self.normalize(text))

    def _tokens_from_normalized(self, normalized: str) -> List[str]:
        tokens = [
            t for t in normalized.split()
            if len(t) >= MIN_TOKEN_LENGTH and t not in self.stopwords
        ]
        return self.stemmer.stem_tokens(tokens)

    @staticmethod
    def _to_text(value: Union[str, bytes, None]) -> str:
        """Байты с битой кодировкой не роняют обработку"""
        if value is None:
            return ""
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        return value
