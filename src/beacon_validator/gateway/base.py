"""
Query Gateway.

The five read operations the validator issues against a knowledge beacon.
Implementations raise TransportError when a query cannot be completed.
"""

from abc import ABC, abstractmethod

from beacon_validator.gateway.models import Concept, ConceptDetails, Evidence, Statement


class QueryGateway(ABC):
    """Abstract read-only access to a knowledge beacon."""

    @abstractmethod
    async def list_concepts(
        self,
        keywords: str,
        semantic_group: str | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> list[Concept]:
        """Search concepts by keywords, optionally restricted to a semantic group."""
        pass

    @abstractmethod
    async def get_concept_details(self, concept_id: str) -> list[ConceptDetails]:
        """Expanded records for one concept identifier (zero or more)."""
        pass

    @abstractmethod
    async def list_statements(
        self,
        concept_ids: list[str],
        page_number: int = 1,
        page_size: int = 10,
        keywords: str | None = None,
        semantic_group: str | None = None,
    ) -> list[Statement]:
        """Statements involving any of the given concepts."""
        pass

    @abstractmethod
    async def list_evidence(
        self,
        statement_id: str,
        keywords: str | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> list[Evidence]:
        """Evidence supporting one statement."""
        pass

    @abstractmethod
    async def list_exact_matches(self, concept_id: str) -> set[str]:
        """Concept identifiers asserted to be exact matches of concept_id."""
        pass
