"""
Beacon Validation Engine.

Conformance checks for a Knowledge Beacon:
- Workflow: concept -> statement -> evidence -> exact match chaining
- Paging: page slices agree with one stable ordering
- Semantic filters: filtered concepts and statements stay inside the group
- Runner: fixed-order orchestration and report aggregation
"""

from beacon_validator.validation.paging import PagingValidator
from beacon_validator.validation.results import (
    CheckOutcome,
    CheckResult,
    Issue,
    IssueSeverity,
    IssueType,
    ValidationReport,
    WorkflowBroken,
    WorkflowContext,
)
from beacon_validator.validation.runner import ValidationRunner
from beacon_validator.validation.semantic_filter import SemanticFilterValidator
from beacon_validator.validation.workflow import WorkflowValidator

__all__ = [
    # Results
    "CheckOutcome",
    "CheckResult",
    "Issue",
    "IssueSeverity",
    "IssueType",
    "ValidationReport",
    "WorkflowBroken",
    "WorkflowContext",
    # Validators
    "WorkflowValidator",
    "PagingValidator",
    "SemanticFilterValidator",
    # Orchestration
    "ValidationRunner",
]
