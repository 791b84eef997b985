"""
Knowledge Beacon record models.

Read-only projections of the records returned by a beacon. Every record
extends IdentifiedEntity so that id-based checks (paging) can treat them
uniformly while the semantic checks use the typed fields.
"""

from pydantic import BaseModel, ConfigDict, Field


class IdentifiedEntity(BaseModel):
    """Any beacon record with a stable CURIE identifier."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(..., description="CURIE identifier")


class Concept(IdentifiedEntity):
    """Concept returned by the /concepts search."""

    name: str | None = Field(default=None, description="Concept name")
    semantic_group: str | None = Field(
        default=None, alias="semanticGroup", description="Semantic group code"
    )
    synonyms: list[str] = Field(default_factory=list)
    definition: str | None = None


class ConceptDetail(BaseModel):
    """Tag/value pair attached to ConceptDetails."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    tag: str | None = None
    value: str | None = None


class ConceptDetails(Concept):
    """Expanded concept record returned by /concepts/{conceptId}."""

    details: list[ConceptDetail] = Field(default_factory=list)


class StatementEndpoint(IdentifiedEntity):
    """Subject, predicate or object of a statement."""

    name: str | None = None
    semantic_group: str | None = Field(default=None, alias="semanticGroup")


class Statement(IdentifiedEntity):
    """Subject-predicate-object statement returned by /statements."""

    subject: StatementEndpoint
    predicate: StatementEndpoint | None = None
    object: StatementEndpoint

    def other_endpoint(self, concept_ids: list[str] | tuple[str, ...]) -> StatementEndpoint:
        """
        Endpoint that was not used to select this statement.

        The subject when the object is one of the query concepts, otherwise the
        object.
        """
        if self.object.id in concept_ids:
            return self.subject
        return self.object


class Evidence(IdentifiedEntity):
    """Evidence supporting one statement, returned by /evidence/{statementId}."""

    label: str | None = None
    date: str | None = None
    statement_id: str | None = Field(
        default=None, description="Statement the evidence was requested for"
    )
