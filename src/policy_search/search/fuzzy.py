"""
Нечёткий поиск по словарю индекса

Методы:
1. Scan - перебор всего словаря с расстоянием Левенштейна
2. SymSpell - индекс удалений, кандидаты проверяются тем же расстоянием
"""
import logging
import threading
import weakref
from typing import List, Set, Tuple, Optional, Callable, Iterable
from collections import defaultdict

logger = logging.getLogger(__name__)

# Как часто проверять отмену при переборе словаря
CHECKPOINT_EVERY = 256

STRATEGIES = ("scan", "symspell")


def levenshtein_distance(s1: str, s2: str) -> int:
    """Расстояние Левенштейна (вставка, удаление, замена)"""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))

    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def generate_deletes(word: str, max_distance: int) -> Set[str]:
    """
    Все варианты слова с удалёнными символами (до max_distance штук)

    Пустая строка тоже вариант: без неё двухбуквенные слова
    на расстоянии 2 не находятся.
    """
    deletes = set()

    def _recurse(w: str, distance: int):
        if distance == 0:
            return
        for i in range(len(w)):
            delete = w[:i] + w[i + 1:]
            if delete not in deletes:
                deletes.add(delete)
                _recurse(delete, distance - 1)

    _recurse(word, max_distance)
    return deletes


class SymSpellIndex:
    """
    Индекс удалений (слово с удалёнными символами -> оригиналы)
    """

    def __init__(self, words: Iterable[str], max_distance: int):
        self.max_distance = max_distance
        self._deletes = defaultdict(set)

        for word in words:
            self._deletes[word].add(word)
            for delete in generate_deletes(word, max_distance):
                self._deletes[delete].add(word)

    def candidates(self, word: str) -> Set[str]:
        found = set(self._deletes.get(word, ()))
        for delete in generate_deletes(word, self.max_distance):
            found.update(self._deletes.get(delete, ()))
        return found


class FuzzyMatcher:
    """
    Поиск термов словаря в пределах max_distance правок

    Вызывается только для термов запроса без точных совпадений.
    Оба метода возвращают одинаковый результат: SymSpell лишь
    сужает перебор.
    """

    def __init__(self, max_distance: int = 2, strategy: str = "scan"):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown fuzzy strategy: {strategy}")

        self.max_distance = max_distance
        self.strategy = strategy

        # SymSpell индекс строится один раз на опубликованный снимок
        self._symspell_cache = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def find(
        self,
        term: str,
        index,
        checkpoint: Optional[Callable[[], None]] = None,
    ) -> List[Tuple[str, int]]:
        """
        Найти похожие термы

        Args:
            term: Нормализованный терм запроса
            index: Снимок InvertedIndex
            checkpoint: Вызывается периодически, может бросить SearchCancelledError

        Returns:
            [(терм словаря, расстояние), ...] по возрастанию расстояния, затем терма
        """
        if self.strategy == "symspell":
            pool = sorted(self._symspell_for(index).candidates(term))
        else:
            pool = index.vocabulary

        found = []
        for i, candidate in enumerate(pool):
            if checkpoint and i % CHECKPOINT_EVERY == 0:
                checkpoint()

            # Слова с большой разницей в длине не подходят заведомо
            if abs(len(candidate) - len(term)) > self.max_distance:
                continue

            distance = levenshtein_distance(term, candidate)
            if distance <= self.max_distance:
                found.append((candidate, distance))

        found.sort(key=lambda x: (x[1], x[0]))

        logger.debug(f"[Fuzzy] '{term}' -> {len(found)} candidates ({self.strategy}, pool={len(pool)})")
        return found

    def _symspell_for(self, index) -> SymSpellIndex:
        with self._lock:
            symspell = self._symspell_cache.get(index)
            if symspell is None:
                symspell = SymSpellIndex(index.vocabulary, self.max_distance)
                self._symspell_cache[index] = symspell
                logger.info(f"[Fuzzy] Built SymSpell index for {len(index.vocabulary)} terms")
            return symspell
