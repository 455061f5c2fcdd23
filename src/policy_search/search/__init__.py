"""
Search модуль - поисковый движок
"""
from .query_processor import QueryProcessor, Stemmer
from .indexer import Indexer, InvertedIndex
from .scorer import Scorer
from .fuzzy import FuzzyMatcher, levenshtein_distance
from .engine import SearchEngine

__all__ = [
    "QueryProcessor",
    "Stemmer",
    "Indexer",
    "InvertedIndex",
    "Scorer",
    "FuzzyMatcher",
    "levenshtein_distance",
    "SearchEngine",
]
