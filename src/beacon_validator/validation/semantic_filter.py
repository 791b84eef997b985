"""
Semantic Filter Validator.

Checks that the ``semgroups`` filter never lets through records of another
semantic group:

- Concepts carry their own group, so each returned concept is compared
  directly.
- Statements have no group of their own. A statement's group is the group of
  the endpoint that was *not* used to select it, which has to be resolved with
  a concept details query.

Each group is an independent probe: a failed query for one group is recorded
and the next group is still checked. A failed linked-concept lookup skips
only that statement. Scanning of a group stops at its first
violation, which is enough to show the filter is broken for that group.
"""

import time
from collections.abc import Sequence

import structlog

from beacon_validator.config.semantic_groups import SemanticGroup
from beacon_validator.gateway.base import QueryGateway
from beacon_validator.gateway.errors import TransportError
from beacon_validator.gateway.models import Statement
from beacon_validator.validation.results import (
    CheckOutcome,
    CheckResult,
    Issue,
    IssueSeverity,
    IssueType,
    WorkflowContext,
)

logger = structlog.get_logger(__name__)

CONCEPT_CHECK_NAME = "semantic_filter.concepts"
STATEMENT_CHECK_NAME = "semantic_filter.statements"


class SemanticFilterValidator:
    """
    Validates semantic group filtering of concepts and statements.

    Usage:
        validator = SemanticFilterValidator(gateway, [SemanticGroup.GENE, ...])
        concept_result = await validator.check_concepts("e")
        statement_result = await validator.check_statements(workflow_context)
    """

    def __init__(
        self,
        gateway: QueryGateway,
        semantic_groups: Sequence[SemanticGroup] | None = None,
        page_size: int = 50,
    ):
        self.gateway = gateway
        self.semantic_groups = list(semantic_groups) if semantic_groups is not None else list(SemanticGroup)
        self.page_size = page_size

    async def check_concepts(self, keywords: str) -> CheckResult:
        """Every concept returned for group g must itself be in group g."""
        start_time = time.time()
        issues: list[Issue] = []
        examined: dict[str, int] = {}

        for group in self.semantic_groups:
            try:
                concepts = await self.gateway.list_concepts(keywords, group.value, 1, self.page_size)
            except TransportError as e:
                issues.append(Issue.from_transport_error(e, semantic_group=group.value))
                logger.error(
                    "Concept query failed",
                    semantic_group=group.value,
                    error=str(e),
                    params=e.params,
                )
                continue

            examined[group.value] = 0
            for concept in concepts:
                examined[group.value] += 1
                if group.matches(concept.semantic_group):
                    continue

                issues.append(
                    Issue(
                        issue_type=IssueType.SEMANTIC_GROUP_MISMATCH,
                        severity=IssueSeverity.ERROR,
                        description=(
                            f"Concept {concept.id} has semantic group {concept.semantic_group} "
                            f"when searching for concepts of group {group.value}"
                        ),
                        details={
                            "concept_id": concept.id,
                            "expected": group.value,
                            "actual": concept.semantic_group,
                        },
                    )
                )
                logger.warning(
                    "Concept outside semantic filter",
                    concept_id=concept.id,
                    expected=group.value,
                    actual=concept.semantic_group,
                )
                break

        return self._create_result(CONCEPT_CHECK_NAME, issues, examined, start_time)

    async def check_statements(self, context: WorkflowContext) -> CheckResult:
        """
        The non-seed endpoint of every statement returned for group g must
        resolve to a concept in group g.
        """
        start_time = time.time()
        issues: list[Issue] = []
        examined: dict[str, int] = {}
        concept_ids = list(context.concept_ids)

        for group in self.semantic_groups:
            try:
                statements = await self.gateway.list_statements(
                    concept_ids, 1, self.page_size, None, group.value
                )
            except TransportError as e:
                issues.append(Issue.from_transport_error(e, semantic_group=group.value))
                logger.error(
                    "Statement filter query failed",
                    semantic_group=group.value,
                    error=str(e),
                    params=e.params,
                )
                continue

            examined[group.value] = 0
            for statement in statements:
                examined[group.value] += 1
                try:
                    issue = await self._check_statement(statement, group, context)
                except TransportError as e:
                    # Unresolved statement; the rest of the group is still checked
                    issues.append(
                        Issue.from_transport_error(
                            e, statement_id=statement.id, semantic_group=group.value
                        )
                    )
                    logger.error(
                        "Linked concept lookup failed",
                        statement_id=statement.id,
                        semantic_group=group.value,
                        error=str(e),
                        params=e.params,
                    )
                    continue
                if issue is not None:
                    issues.append(issue)
                    logger.warning("Statement outside semantic filter", **issue.details)
                    break

        return self._create_result(STATEMENT_CHECK_NAME, issues, examined, start_time)

    async def _check_statement(
        self,
        statement: Statement,
        group: SemanticGroup,
        context: WorkflowContext,
    ) -> Issue | None:
        """Resolve the linked concept of one statement and compare its group."""
        linked_id = statement.other_endpoint(context.concept_ids).id
        details_list = await self.gateway.get_concept_details(linked_id)

        if not details_list:
            return Issue(
                issue_type=IssueType.NO_DETAILS_FOR_LINKED_CONCEPT,
                severity=IssueSeverity.ERROR,
                description=(
                    f"No concept details found for concept {linked_id} linked by statement "
                    f"{statement.id} (semantic filter {group.value})"
                ),
                details={
                    "statement_id": statement.id,
                    "concept_id": linked_id,
                    "semantic_group": group.value,
                },
            )

        linked = details_list[0]
        if group.matches(linked.semantic_group):
            return None

        return Issue(
            issue_type=IssueType.SEMANTIC_GROUP_MISMATCH,
            severity=IssueSeverity.ERROR,
            description=(
                f"Searched for statements containing concept {context.concept_id} with semantic "
                f"filter {group.value}; statement {statement.id} links concept {linked.id} "
                f"of semantic group {linked.semantic_group}"
            ),
            details={
                "statement_id": statement.id,
                "concept_id": linked.id,
                "expected": group.value,
                "actual": linked.semantic_group,
            },
        )

    def _create_result(
        self,
        name: str,
        issues: list[Issue],
        examined: dict[str, int],
        start_time: float,
    ) -> CheckResult:
        """Derive the check outcome from the issues recorded across groups."""
        violations = [i for i in issues if i.issue_type != IssueType.TRANSPORT_ERROR]
        errors = [i for i in issues if i.issue_type == IssueType.TRANSPORT_ERROR]
        total_examined = sum(examined.values())
        failed_groups = list(dict.fromkeys(i.details.get("semantic_group") for i in errors))

        if violations:
            outcome = CheckOutcome.FAILED
            message = "; ".join(i.description for i in violations)
        elif errors:
            outcome = CheckOutcome.ERRORED
            message = (
                f"{len(errors)} beacon queries failed in semantic groups "
                f"{', '.join(failed_groups)}: {errors[0].description}"
            )
        elif total_examined == 0:
            outcome = CheckOutcome.SKIPPED
            message = "No records returned for any semantic group; filter cannot be checked"
            issues = issues + [
                Issue(
                    issue_type=IssueType.INAPPLICABLE,
                    severity=IssueSeverity.INFO,
                    description=message,
                )
            ]
        else:
            outcome = CheckOutcome.PASSED
            message = ""

        logger.info(
            "Semantic filter check completed",
            check=name,
            outcome=outcome.value,
            groups=len(self.semantic_groups),
            records_examined=total_examined,
            violations=len(violations),
            errors=len(errors),
        )

        return CheckResult(
            name=name,
            outcome=outcome,
            message=message,
            issues=issues,
            details={
                "semantic_groups": [g.value for g in self.semantic_groups],
                "records_examined": examined,
                "failed_groups": failed_groups,
            },
            execution_time_ms=(time.time() - start_time) * 1000,
        )
