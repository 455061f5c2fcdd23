"""
Исключения сервиса
"""


class SearchError(Exception):
    """Базовая ошибка поиска"""
    pass


class SearchCancelledError(SearchError):
    """Поиск прерван по таймауту или сигналу отмены"""

    def __init__(self, query: str, reason: str = "cancelled"):
        self.query = query
        self.reason = reason
        super().__init__(f"Search '{query}' {reason}")


class DocumentNotFoundError(Exception):
    """Документ не найден в хранилище"""

    def __init__(self, document_id: int):
        self.document_id = document_id
        super().__init__(f"Document {document_id} not found")
