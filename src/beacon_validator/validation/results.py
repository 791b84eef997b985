"""
Validation Results.

Outcome, issue and report types shared by the validators:
- CheckOutcome / CheckResult: one outcome per check with diagnostics
- Issue: a concrete finding (ids, expected/actual values)
- WorkflowContext / WorkflowBroken: seed identifiers or terminal failure
- ValidationReport: aggregated run report
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from beacon_validator.gateway.errors import TransportError


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class CheckOutcome(str, Enum):
    """Outcome of a single check."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERRORED = "errored"


class IssueType(str, Enum):
    """Kinds of findings a check can record."""

    WORKFLOW_BROKEN = "workflow_broken"                   # Load-bearing step returned no data
    TRANSPORT_ERROR = "transport_error"                   # Query could not be completed
    PAGING_MISMATCH = "paging_mismatch"                   # Page slice differs from full page
    PAGING_COUNT_MISMATCH = "paging_count_mismatch"       # Half pages do not add up
    SEMANTIC_GROUP_MISMATCH = "semantic_group_mismatch"   # Record outside the filter group
    NO_DETAILS_FOR_LINKED_CONCEPT = "no_details_for_linked_concept"
    NO_DETAILS = "no_details"                             # Concept details empty
    NO_EVIDENCE = "no_evidence"                           # Statement has no evidence
    INAPPLICABLE = "inapplicable"                         # Not enough data to run the check


class IssueSeverity(str, Enum):
    """Severity levels for issues."""

    ERROR = "error"       # Invariant violated or query failed
    WARNING = "warning"   # Informational step came back empty or failed
    INFO = "info"         # For information only


@dataclass
class Issue:
    """A concrete finding recorded by a check."""

    issue_type: IssueType
    severity: IssueSeverity
    description: str
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_transport_error(
        cls,
        error: TransportError,
        severity: IssueSeverity = IssueSeverity.ERROR,
        **details: Any,
    ) -> "Issue":
        """Wrap a gateway failure, keeping the attempted query parameters."""
        return cls(
            issue_type=IssueType.TRANSPORT_ERROR,
            severity=severity,
            description=str(error),
            details={**error.to_dict(), **details},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "issue_type": self.issue_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "details": self.details,
        }


@dataclass
class CheckResult:
    """Result of a single check."""

    name: str
    outcome: CheckOutcome
    message: str = ""
    issues: list[Issue] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)
    execution_time_ms: float = 0.0

    @property
    def passed(self) -> bool:
        return self.outcome == CheckOutcome.PASSED

    @property
    def violations(self) -> list[Issue]:
        return [
            i for i in self.issues
            if i.severity == IssueSeverity.ERROR and i.issue_type != IssueType.TRANSPORT_ERROR
        ]

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.issue_type == IssueType.TRANSPORT_ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "outcome": self.outcome.value,
            "message": self.message,
            "execution_time_ms": round(self.execution_time_ms, 2),
            "details": self.details,
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass(frozen=True)
class WorkflowContext:
    """Seed identifiers produced by the workflow check."""

    concept_id: str
    statement_id: str
    concept_ids: tuple[str, ...]

    @classmethod
    def seeded(cls, concept_id: str, statement_id: str) -> "WorkflowContext":
        return cls(concept_id=concept_id, statement_id=statement_id, concept_ids=(concept_id,))


@dataclass(frozen=True)
class WorkflowBroken:
    """A load-bearing workflow step produced no usable result."""

    step: str
    reason: str
    error: TransportError | None = None

    def __str__(self) -> str:
        return f"Workflow broken at {self.step}: {self.reason}"


@dataclass
class ValidationReport:
    """Complete report of one validation run."""

    run_id: str
    checks: list[CheckResult] = field(default_factory=list)
    aborted: bool = False
    abort_reason: str = ""
    start_time: str = ""
    end_time: str = ""
    total_duration_ms: float = 0.0
    summary: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.start_time:
            self.start_time = _utc_now()

    def _bucket(self, outcome: CheckOutcome) -> dict[str, CheckResult]:
        return {c.name: c for c in self.checks if c.outcome == outcome}

    @property
    def passed(self) -> dict[str, CheckResult]:
        return self._bucket(CheckOutcome.PASSED)

    @property
    def failed(self) -> dict[str, CheckResult]:
        return self._bucket(CheckOutcome.FAILED)

    @property
    def skipped(self) -> dict[str, CheckResult]:
        return self._bucket(CheckOutcome.SKIPPED)

    @property
    def errored(self) -> dict[str, CheckResult]:
        return self._bucket(CheckOutcome.ERRORED)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed) or self.aborted

    def get(self, name: str) -> CheckResult | None:
        """Look up a check result by name."""
        for check in self.checks:
            if check.name == name:
                return check
        return None

    def exit_code(self, fail_on_error: bool = False) -> int:
        """Process exit status: 1 on failure or abort (or error when requested)."""
        if self.has_failures:
            return 1
        if fail_on_error and self.errored:
            return 1
        return 0

    def finalize(self) -> None:
        """Finalize the report after all checks complete."""
        self.end_time = _utc_now()
        self.summary = {
            "total_checks": len(self.checks),
            "passed": sorted(self.passed),
            "failed": sorted(self.failed),
            "skipped": sorted(self.skipped),
            "errored": sorted(self.errored),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "aborted": self.aborted,
            "abort_reason": self.abort_reason,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "total_duration_ms": round(self.total_duration_ms, 2),
            "summary": self.summary,
            "checks": [c.to_dict() for c in self.checks],
        }
