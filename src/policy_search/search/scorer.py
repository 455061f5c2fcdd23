"""
Ранжирование: TF x IDF x вес поля
"""
import math
from typing import Dict, List, Optional, Tuple

from ..core.models import Field, Posting, FIELD_WEIGHTS


class Scorer:
    """
    Подсчёт релевантности по снимку индекса

    idf(t) = ln(N / n), где N - активные документы снимка,
    n - документы с термом. Для неизвестных термов и пустого корпуса 0.
    """

    def __init__(
        self,
        field_weights: Optional[Dict[Field, float]] = None,
        fuzzy_distance_penalty: bool = False,
    ):
        self.field_weights = dict(FIELD_WEIGHTS)
        if field_weights:
            self.field_weights.update(field_weights)
        self.fuzzy_distance_penalty = fuzzy_distance_penalty

    def idf(self, index, term: str) -> float:
        total = index.document_count
        with_term = index.document_frequency(term)

        if total == 0 or with_term == 0:
            return 0.0

        return math.log(total / with_term)

    def field_weight(self, f: Field) -> float:
        return self.field_weights.get(f, 1.0)

    def contribution(self, posting: Posting, idf: float, distance: int = 0) -> float:
        """Вклад одного вхождения в скор документа"""
        score = posting.frequency * idf * self.field_weight(posting.field)

        # Штраф за опечатку выключен по умолчанию: нечёткое совпадение
        # весит как точное
        if distance and self.fuzzy_distance_penalty:
            score /= 1 + distance

        return score

    @staticmethod
    def rank(doc_scores: Dict[int, float]) -> List[Tuple[int, float]]:
        """По убыванию скора, при равенстве - по возрастанию id"""
        return sorted(doc_scores.items(), key=lambda x: (-x[1], x[0]))
