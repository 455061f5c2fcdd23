"""Shared fixtures: scenario corpus, indexer, engine."""

from __future__ import annotations

import pytest

from policy_search.core.models import Document
from policy_search.search.indexer import Indexer
from policy_search.search.engine import SearchEngine
from policy_search.search.query_processor import QueryProcessor


def make_document(id: int, name: str, content: str = "", **kwargs) -> Document:
    return Document(id=id, name=name, content=content, **kwargs)


@pytest.fixture
def processor() -> QueryProcessor:
    return QueryProcessor()


@pytest.fixture
def scenario_documents() -> list[Document]:
    """Password / VPN / incident corpus."""
    return [
        make_document(1, "Password Policy", "use strong password"),
        make_document(2, "VPN Guide", "connect vpn password reset"),
        make_document(3, "Incident Response", "report incident"),
    ]


@pytest.fixture
def indexer(scenario_documents) -> Indexer:
    idx = Indexer()
    idx.build_index(scenario_documents)
    return idx


@pytest.fixture
def engine(indexer) -> SearchEngine:
    return SearchEngine(indexer)
