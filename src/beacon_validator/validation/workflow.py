"""
Workflow Validator.

Walks one representative path through the beacon:

    concept search -> concept details -> statements -> evidence -> exact matches

proving that identifiers returned by one query are accepted by the next.
The concept search and statement query are load-bearing: every later check
depends on the identifiers they produce, so an empty or failed response there
ends the run. The other steps are informational and only add warnings.
"""

import time

import structlog

from beacon_validator.config.settings import ValidatorSettings
from beacon_validator.gateway.base import QueryGateway
from beacon_validator.gateway.errors import TransportError
from beacon_validator.validation.results import (
    CheckOutcome,
    CheckResult,
    Issue,
    IssueSeverity,
    IssueType,
    WorkflowBroken,
    WorkflowContext,
)

logger = structlog.get_logger(__name__)

CHECK_NAME = "workflow"


class WorkflowValidator:
    """
    Validates the concept -> statement -> evidence -> exact-match workflow.

    Usage:
        validator = WorkflowValidator(gateway, settings)
        result, outcome = await validator.validate()

        if isinstance(outcome, WorkflowBroken):
            ...  # stop, nothing else can run
        else:
            outcome.concept_id, outcome.statement_id, outcome.concept_ids
    """

    def __init__(self, gateway: QueryGateway, settings: ValidatorSettings):
        self.gateway = gateway
        self.settings = settings

    async def validate(self) -> tuple[CheckResult, WorkflowContext | WorkflowBroken]:
        """
        Run the workflow.

        Returns:
            The workflow check result and either the seed identifiers for the
            remaining checks or the WorkflowBroken reason.
        """
        start_time = time.time()
        issues: list[Issue] = []
        details: dict[str, object] = {}
        page_size = self.settings.workflow_page_size

        def finish(outcome: CheckOutcome, message: str = "") -> CheckResult:
            return CheckResult(
                name=CHECK_NAME,
                outcome=outcome,
                message=message,
                issues=issues,
                details=details,
                execution_time_ms=(time.time() - start_time) * 1000,
            )

        # Step 1: concept search (load-bearing)
        try:
            concepts = await self.gateway.list_concepts(
                self.settings.keywords, None, 1, page_size
            )
        except TransportError as e:
            broken = WorkflowBroken("list_concepts", "concept search failed", e)
            issues.append(Issue.from_transport_error(e))
            logger.error("Concept search failed", error=str(e), params=e.params)
            return finish(CheckOutcome.ERRORED, str(broken)), broken

        if not concepts:
            broken = WorkflowBroken("list_concepts", "no concepts returned")
            issues.append(self._broken_issue(broken, keywords=self.settings.keywords))
            logger.error("No concepts returned", keywords=self.settings.keywords)
            return finish(CheckOutcome.FAILED, str(broken)), broken

        concept_id = concepts[0].id
        concept_ids = [concept_id]
        details["concept_id"] = concept_id

        # Step 2: concept details (informational)
        try:
            concept_details = await self.gateway.get_concept_details(concept_id)
            details["concept_details_count"] = len(concept_details)
            if not concept_details:
                issues.append(
                    Issue(
                        issue_type=IssueType.NO_DETAILS,
                        severity=IssueSeverity.WARNING,
                        description=f"No concept details returned for {concept_id}",
                        details={"concept_id": concept_id},
                    )
                )
                logger.warning("No concept details returned", concept_id=concept_id)
        except TransportError as e:
            issues.append(Issue.from_transport_error(e, severity=IssueSeverity.WARNING))
            logger.warning("Concept details query failed", error=str(e), params=e.params)

        # Step 3: statements about the concept (load-bearing)
        try:
            statements = await self.gateway.list_statements(concept_ids, 1, page_size, None, None)
        except TransportError as e:
            broken = WorkflowBroken("list_statements", "statement query failed", e)
            issues.append(Issue.from_transport_error(e))
            logger.error("Statement query failed", error=str(e), params=e.params)
            return finish(CheckOutcome.ERRORED, str(broken)), broken

        if not statements:
            broken = WorkflowBroken("list_statements", "no statements returned")
            issues.append(self._broken_issue(broken, concept_ids=concept_ids))
            logger.error("No statements returned", concept_ids=concept_ids)
            return finish(CheckOutcome.FAILED, str(broken)), broken

        statement_id = statements[0].id
        details["statement_id"] = statement_id

        # Step 4: evidence for the statement (informational)
        try:
            evidence = await self.gateway.list_evidence(statement_id, None, 1, page_size)
            details["evidence_count"] = len(evidence)
            if not evidence:
                issues.append(
                    Issue(
                        issue_type=IssueType.NO_EVIDENCE,
                        severity=IssueSeverity.WARNING,
                        description=f"No evidence returned for statement {statement_id}",
                        details={"statement_id": statement_id},
                    )
                )
                logger.warning("No evidence returned", statement_id=statement_id)
        except TransportError as e:
            issues.append(Issue.from_transport_error(e, severity=IssueSeverity.WARNING))
            logger.warning("Evidence query failed", error=str(e), params=e.params)

        # Step 5: exact matches (an empty set is a valid answer)
        try:
            exact_matches = await self.gateway.list_exact_matches(concept_id)
            details["exact_match_count"] = len(exact_matches)
        except TransportError as e:
            issues.append(Issue.from_transport_error(e, severity=IssueSeverity.WARNING))
            logger.warning("Exact match query failed", error=str(e), params=e.params)

        logger.info(
            "Workflow completed",
            concept_id=concept_id,
            statement_id=statement_id,
            warnings=len(issues),
        )

        return finish(CheckOutcome.PASSED), WorkflowContext.seeded(concept_id, statement_id)

    @staticmethod
    def _broken_issue(broken: WorkflowBroken, **details: object) -> Issue:
        return Issue(
            issue_type=IssueType.WORKFLOW_BROKEN,
            severity=IssueSeverity.ERROR,
            description=str(broken),
            details={"step": broken.step, **details},
        )
