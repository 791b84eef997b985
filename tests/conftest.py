"""
Pytest Configuration and Shared Fixtures.

This module provides shared fixtures for testing the beacon validator,
including an in-memory beacon that implements QueryGateway.
"""

from typing import Any
from unittest.mock import patch

import pytest

from beacon_validator.config.settings import Settings, ValidatorSettings, get_settings
from beacon_validator.gateway.base import QueryGateway
from beacon_validator.gateway.errors import TransportError
from beacon_validator.gateway.models import (
    Concept,
    ConceptDetails,
    Evidence,
    Statement,
    StatementEndpoint,
)


# =============================================================================
# In-Memory Beacon
# =============================================================================


def _page(items: list[Any], page_number: int, page_size: int) -> list[Any]:
    start = (page_number - 1) * page_size
    return list(items[start:start + page_size])


class FakeBeacon(QueryGateway):
    """
    Well-behaved in-memory beacon over fixed fixture data.

    Records every call in ``calls`` as ``(operation, kwargs)``. Individual
    operations can be made to fail by adding a TransportError to ``failures``
    keyed by operation name.
    """

    def __init__(
        self,
        concepts: list[Concept],
        statements: list[Statement],
        evidence: dict[str, list[Evidence]],
        exact_matches: dict[str, set[str]] | None = None,
    ):
        self.concepts = concepts
        self.statements = statements
        self.evidence = evidence
        self.exact_matches = exact_matches or {}
        self.failures: dict[str, TransportError] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _record(self, operation: str, **kwargs: Any) -> None:
        self.calls.append((operation, kwargs))
        if operation in self.failures:
            raise self.failures[operation]

    def _concept_group(self, concept_id: str) -> str | None:
        for concept in self.concepts:
            if concept.id == concept_id:
                return concept.semantic_group
        return None

    async def list_concepts(
        self,
        keywords: str,
        semantic_group: str | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> list[Concept]:
        self._record(
            "list_concepts",
            keywords=keywords,
            semantic_group=semantic_group,
            page_number=page_number,
            page_size=page_size,
        )
        matches = [
            c for c in self.concepts
            if keywords.lower() in (c.name or "").lower()
            and (semantic_group is None or (c.semantic_group or "").lower() == semantic_group.lower())
        ]
        return _page(matches, page_number, page_size)

    async def get_concept_details(self, concept_id: str) -> list[ConceptDetails]:
        self._record("get_concept_details", concept_id=concept_id)
        return [
            ConceptDetails.model_validate(c.model_dump(by_alias=True))
            for c in self.concepts
            if c.id == concept_id
        ]

    async def list_statements(
        self,
        concept_ids: list[str],
        page_number: int = 1,
        page_size: int = 10,
        keywords: str | None = None,
        semantic_group: str | None = None,
    ) -> list[Statement]:
        self._record(
            "list_statements",
            concept_ids=list(concept_ids),
            page_number=page_number,
            page_size=page_size,
            keywords=keywords,
            semantic_group=semantic_group,
        )
        matches = []
        for statement in self.statements:
            if statement.subject.id not in concept_ids and statement.object.id not in concept_ids:
                continue
            if semantic_group is not None:
                other = statement.other_endpoint(concept_ids)
                if (self._concept_group(other.id) or "").lower() != semantic_group.lower():
                    continue
            matches.append(statement)
        return _page(matches, page_number, page_size)

    async def list_evidence(
        self,
        statement_id: str,
        keywords: str | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> list[Evidence]:
        self._record(
            "list_evidence",
            statement_id=statement_id,
            keywords=keywords,
            page_number=page_number,
            page_size=page_size,
        )
        return _page(self.evidence.get(statement_id, []), page_number, page_size)

    async def list_exact_matches(self, concept_id: str) -> set[str]:
        self._record("list_exact_matches", concept_id=concept_id)
        return set(self.exact_matches.get(concept_id, set()))

    def operations(self) -> list[str]:
        """Names of the operations called, in order."""
        return [operation for operation, _ in self.calls]


def make_concept(concept_id: str, name: str, semantic_group: str | None) -> Concept:
    return Concept.model_validate({"id": concept_id, "name": name, "semanticGroup": semantic_group})


def make_statement(statement_id: str, subject_id: str, object_id: str) -> Statement:
    return Statement(
        id=statement_id,
        subject=StatementEndpoint(id=subject_id),
        predicate=StatementEndpoint(id="RO:0002434", name="interacts with"),
        object=StatementEndpoint(id=object_id),
    )


def make_evidence(statement_id: str, count: int) -> list[Evidence]:
    return [
        Evidence(id=f"PMID:{1000 + i}", label=f"publication {i}", statement_id=statement_id)
        for i in range(count)
    ]


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def sample_concepts() -> list[Concept]:
    """Concepts across three semantic groups, all matching keyword 'e'."""
    return [
        make_concept("CHEBI:16236", "ethanol", "CHEM"),
        make_concept("NCBIGene:124", "alcohol dehydrogenase gene", "GENE"),
        make_concept("DOID:1574", "alcohol use disease", "DISO"),
        make_concept("CHEBI:15347", "acetone", "chem"),
        make_concept("NCBIGene:217", "aldehyde dehydrogenase gene", "GENE"),
        make_concept("DOID:0050741", "alcohol dependence", "DISO"),
    ]


@pytest.fixture
def sample_statements() -> list[Statement]:
    """Statements about ethanol; one has ethanol as the object."""
    return [
        make_statement("SEMMED:1", "CHEBI:16236", "NCBIGene:124"),
        make_statement("SEMMED:2", "CHEBI:16236", "DOID:1574"),
        make_statement("SEMMED:3", "NCBIGene:217", "CHEBI:16236"),
        make_statement("SEMMED:4", "CHEBI:16236", "DOID:0050741"),
    ]


@pytest.fixture
def beacon_factory() -> type[FakeBeacon]:
    """The in-memory beacon class, for tests that need their own data."""
    return FakeBeacon


@pytest.fixture
def concept_factory() -> Any:
    return make_concept


@pytest.fixture
def statement_factory() -> Any:
    return make_statement


@pytest.fixture
def fake_beacon(
    sample_concepts: list[Concept],
    sample_statements: list[Statement],
) -> FakeBeacon:
    """In-memory beacon that satisfies every invariant."""
    return FakeBeacon(
        concepts=sample_concepts,
        statements=sample_statements,
        evidence={"SEMMED:1": make_evidence("SEMMED:1", 4)},
        exact_matches={"CHEBI:16236": {"DRUGBANK:DB00898"}},
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def validator_settings() -> ValidatorSettings:
    """Validator settings with the default keyword and page sizes."""
    return ValidatorSettings(
        keywords="e",
        workflow_page_size=1,
        paging_page_size=50,
        semantic_page_size=50,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with mock values."""
    with patch.dict(
        "os.environ",
        {
            "BEACON_BASE_URL": "http://beacon.test/api",
            "BEACON_TIMEOUT_SECONDS": "5",
            "VALIDATOR_KEYWORDS": "alcohol",
        },
    ):
        # Clear cache and get fresh settings
        get_settings.cache_clear()
        settings = get_settings()
    get_settings.cache_clear()
    return settings


@pytest.fixture
def transport_error() -> TransportError:
    """A gateway failure with its query parameters."""
    return TransportError(
        "list_concepts",
        {"keywords": "e", "semantic_group": "GENE", "page_number": 1, "page_size": 50},
        "ConnectError: connection refused",
    )
