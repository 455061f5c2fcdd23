"""
Хранилище документов - в памяти процесса

Источник снимков для индекса и событий об изменениях документов.
"""
import logging
import threading
from dataclasses import replace
from typing import Optional, List, Dict, Any, Callable

from ..core.exceptions import DocumentNotFoundError
from ..core.interfaces import IDocumentStore
from ..core.models import Document

logger = logging.getLogger(__name__)

# Слушатель изменений: (событие, документ)
Listener = Callable[[str, Document], None]

EDITABLE_FIELDS = ("name", "content", "description", "category", "tags", "document_type", "active")


# Демо-документы для пустого хранилища
SAMPLE_DOCUMENTS = [
    {
        "name": "Password Policy",
        "content": "Passwords must be at least 12 characters long and include uppercase, lowercase, "
                   "numbers, and special characters. Passwords must be changed every 90 days.",
        "description": "Comprehensive password requirements for all company accounts",
        "category": "Authentication",
        "document_type": "policy",
        "tags": ["password", "security", "authentication", "compliance"],
        "created_by": "IT Security Team",
    },
    {
        "name": "Data Classification Policy",
        "content": "All company data must be classified as Public, Internal, Confidential, or Restricted. "
                   "Confidential and Restricted data requires encryption at rest and in transit.",
        "description": "Guidelines for classifying and protecting company data",
        "category": "Data Protection",
        "document_type": "policy",
        "tags": ["data", "classification", "encryption", "confidential"],
        "created_by": "Data Protection Officer",
    },
    {
        "name": "Remote Work Security Policy",
        "content": "Remote workers must use company-approved VPN, enable device encryption, and follow "
                   "secure Wi-Fi practices. Personal devices require MDM enrollment.",
        "description": "Security requirements for remote work arrangements",
        "category": "Remote Work",
        "document_type": "policy",
        "tags": ["remote", "vpn", "encryption", "mdm", "wifi"],
        "created_by": "IT Operations",
    },
    {
        "name": "Incident Response Policy",
        "content": "Security incidents must be reported within 2 hours. Follow the escalation matrix: "
                   "L1 (Help Desk) -> L2 (Security Team) -> L3 (CISO). Document all actions taken.",
        "description": "Procedures for reporting and handling security incidents",
        "category": "Incident Response",
        "document_type": "policy",
        "tags": ["incident", "response", "escalation", "security", "reporting"],
        "created_by": "CISO Office",
    },
    {
        "name": "New Employee Security Onboarding",
        "content": "Welcome to the company! This guide covers essential security practices including "
                   "password setup, VPN configuration, email security awareness, and device encryption. "
                   "Please complete all steps within your first week.",
        "description": "Complete security onboarding checklist for new employees",
        "category": "Onboarding",
        "document_type": "onboarding",
        "tags": ["onboarding", "new-employee", "checklist", "setup"],
        "created_by": "HR Security Team",
    },
    {
        "name": "VPN Setup Guide",
        "content": "Step-by-step instructions for configuring the company VPN on Windows, Mac, and mobile "
                   "devices. Includes troubleshooting common connection issues.",
        "description": "Technical guide for VPN setup and configuration",
        "category": "Technical Guides",
        "document_type": "onboarding",
        "tags": ["vpn", "setup", "configuration", "troubleshooting", "guide"],
        "created_by": "IT Help Desk",
    },
]


class DocumentStore(IDocumentStore):
    """Хранилище документов с уведомлением подписчиков"""

    def __init__(self):
        self._documents: Dict[int, Document] = {}
        self._next_id = 1
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    # ========== SUBSCRIPTIONS ==========

    def subscribe(self, listener: Listener) -> None:
        """Подписка на created / updated / deleted"""
        self._listeners.append(listener)

    @property
    def lock(self):
        """Блокировка записи: пока она взята, хранилище не меняется"""
        return self._lock

    def _notify(self, event: str, document: Document) -> None:
        # Вызывается под self._lock: слушатели видят изменения в порядке записи
        for listener in self._listeners:
            listener(event, document.copy())

    # ========== READ ==========

    def get(self, document_id: int) -> Document:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                raise DocumentNotFoundError(document_id)
            return document.copy()

    def list(
        self,
        document_type: Optional[str] = None,
        category: Optional[str] = None,
        active_only: bool = False,
    ) -> List[Document]:
        """Список документов с фильтрами"""
        with self._lock:
            documents = [d.copy() for _, d in sorted(self._documents.items())]

        if active_only:
            documents = [d for d in documents if d.active]
        if document_type:
            documents = [d for d in documents if d.document_type == document_type]
        if category:
            documents = [d for d in documents if d.category.lower() == category.lower()]

        return documents

    def list_active(self) -> List[Document]:
        return self.list(active_only=True)

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    # ========== WRITE ==========

    def create(self, document: Document) -> Document:
        """Создание документа, id назначается хранилищем"""
        with self._lock:
            created = replace(document.copy(), id=self._next_id)
            self._documents[created.id] = created
            self._next_id += 1

            logger.info(f"[Store] Created {created.document_type} document {created.id}: {created.name}")
            self._notify("created", created)

        return created.copy()

    def update(self, document_id: int, updates: Dict[str, Any]) -> Document:
        """Обновление только переданных полей"""
        changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS and v is not None}

        with self._lock:
            current = self._documents.get(document_id)
            if current is None:
                raise DocumentNotFoundError(document_id)

            if "tags" in changes:
                changes["tags"] = list(changes["tags"])
            updated = replace(current, **changes)
            self._documents[document_id] = updated

            logger.info(f"[Store] Updated document {document_id}: {sorted(changes)}")
            self._notify("updated", updated)

        return updated.copy()

    def delete(self, document_id: int) -> None:
        """Мягкое удаление: документ деактивируется"""
        with self._lock:
            current = self._documents.get(document_id)
            if current is None:
                raise DocumentNotFoundError(document_id)

            deleted = replace(current, active=False)
            self._documents[document_id] = deleted

            logger.info(f"[Store] Deactivated document {document_id}")
            self._notify("deleted", deleted)

    def seed(self, samples: Optional[List[Dict[str, Any]]] = None) -> int:
        """Заполнить пустое хранилище демо-документами"""
        if self.count() > 0:
            logger.info("[Store] Store already contains documents, skipping seed")
            return 0

        samples = SAMPLE_DOCUMENTS if samples is None else samples
        for sample in samples:
            self.create(Document(id=0, **sample))

        logger.info(f"[Store] Seeded {len(samples)} documents")
        return len(samples)
