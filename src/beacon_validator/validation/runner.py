"""
Validation Runner.

Runs the beacon conformance suite in a fixed order:

1. workflow                      (produces the seed identifiers)
2. paging.concepts / paging.statements / paging.evidence
3. semantic_filter.concepts / semantic_filter.statements

A broken workflow aborts the run because every later check needs its seed
identifiers. Any other failure is recorded and the next check runs.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog

from beacon_validator.config.settings import ValidatorSettings, get_settings
from beacon_validator.gateway.base import QueryGateway
from beacon_validator.observability.logging import LogContext
from beacon_validator.validation.paging import PagingValidator
from beacon_validator.validation.results import (
    CheckOutcome,
    CheckResult,
    ValidationReport,
    WorkflowBroken,
    WorkflowContext,
)
from beacon_validator.validation.semantic_filter import SemanticFilterValidator
from beacon_validator.validation.workflow import WorkflowValidator

logger = structlog.get_logger(__name__)


class ValidationRunner:
    """
    Orchestrates the beacon validation suite.

    Usage:
        async with create_beacon_client() as gateway:
            runner = ValidationRunner(gateway)
            report = await runner.run_all()

        sys.exit(report.exit_code())
    """

    def __init__(
        self,
        gateway: QueryGateway,
        settings: ValidatorSettings | None = None,
    ):
        self.gateway = gateway
        self.settings = settings or get_settings().validator
        self.workflow_validator = WorkflowValidator(gateway, self.settings)
        self.paging_validator = PagingValidator(full_page_size=self.settings.paging_page_size)
        self.semantic_filter_validator = SemanticFilterValidator(
            gateway,
            semantic_groups=self.settings.semantic_groups,
            page_size=self.settings.semantic_page_size,
        )

    async def run_all(self, run_id: str | None = None) -> ValidationReport:
        """
        Run every check and aggregate the results.

        Args:
            run_id: Optional run identifier (generated when omitted)

        Returns:
            ValidationReport with exactly one outcome per executed check
        """
        run_id = run_id or str(uuid.uuid4())[:8]
        start_time = time.time()
        report = ValidationReport(run_id=run_id)

        with LogContext(run_id=run_id):
            logger.info("Starting beacon validation", keywords=self.settings.keywords)

            with LogContext(check="workflow"):
                logger.info("Testing basic workflow from concept search to evidence")
                workflow_result, outcome = await self.workflow_validator.validate()
            report.checks.append(workflow_result)

            if isinstance(outcome, WorkflowBroken):
                report.aborted = True
                report.abort_reason = str(outcome)
                logger.error("Validation aborted", reason=report.abort_reason)
            else:
                for name, check in self._dependent_checks(outcome):
                    report.checks.append(await self._run_check(name, check))

            report.total_duration_ms = (time.time() - start_time) * 1000
            report.finalize()

            logger.info(
                "Beacon validation completed",
                aborted=report.aborted,
                passed=len(report.passed),
                failed=len(report.failed),
                skipped=len(report.skipped),
                errored=len(report.errored),
                duration_ms=round(report.total_duration_ms, 2),
            )

        return report

    def _dependent_checks(
        self,
        context: WorkflowContext,
    ) -> list[tuple[str, Callable[[], Awaitable[CheckResult]]]]:
        """Checks that run on the seed identifiers, in execution order."""
        keywords = self.settings.keywords
        concept_ids = list(context.concept_ids)
        paging = self.paging_validator
        semantic = self.semantic_filter_validator
        gateway = self.gateway

        return [
            (
                "paging.concepts",
                lambda: paging.check_paging(
                    "paging.concepts",
                    lambda page, size: gateway.list_concepts(keywords, None, page, size),
                ),
            ),
            (
                "paging.statements",
                lambda: paging.check_paging(
                    "paging.statements",
                    lambda page, size: gateway.list_statements(concept_ids, page, size, None, None),
                ),
            ),
            (
                "paging.evidence",
                lambda: paging.check_paging(
                    "paging.evidence",
                    lambda page, size: gateway.list_evidence(context.statement_id, None, page, size),
                ),
            ),
            ("semantic_filter.concepts", lambda: semantic.check_concepts(keywords)),
            ("semantic_filter.statements", lambda: semantic.check_statements(context)),
        ]

    async def _run_check(
        self,
        name: str,
        check: Callable[[], Awaitable[CheckResult]],
    ) -> CheckResult:
        """Run one check; an unexpected exception marks it errored."""
        start_time = time.time()

        with LogContext(check=name):
            logger.info("Running check")
            try:
                return await check()
            except Exception as e:
                logger.exception("Check raised unexpectedly", error=str(e))
                return CheckResult(
                    name=name,
                    outcome=CheckOutcome.ERRORED,
                    message=f"{type(e).__name__}: {e}",
                    execution_time_ms=(time.time() - start_time) * 1000,
                )
