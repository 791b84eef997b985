"""
Paging Validator.

Black-box check that a paginated query is a stable slicing of one ordering:
the first two pages of size n must reproduce, index by index, the first 2n
records of a single larger page. No particular sort order is assumed, only
that repeated queries over the same filters return the same order.
"""

import time
from collections.abc import Awaitable, Callable, Sequence

import structlog

from beacon_validator.gateway.errors import TransportError
from beacon_validator.gateway.models import IdentifiedEntity
from beacon_validator.validation.results import (
    CheckOutcome,
    CheckResult,
    Issue,
    IssueSeverity,
    IssueType,
)

logger = structlog.get_logger(__name__)

# (page_number, page_size) -> ordered page of records
PageQuery = Callable[[int, int], Awaitable[Sequence[IdentifiedEntity] | None]]


def _first_slice_mismatch(
    expected: Sequence[IdentifiedEntity],
    actual: Sequence[IdentifiedEntity],
    count: int,
) -> tuple[int, str, str | None] | None:
    """Index and ids of the first position where the slices disagree."""
    for i in range(count):
        actual_id = actual[i].id if i < len(actual) else None
        if expected[i].id != actual_id:
            return i, expected[i].id, actual_id
    return None


class PagingValidator:
    """
    Validates that pagination is a consistent slicing of a stable ordering.

    Usage:
        validator = PagingValidator(full_page_size=50)
        result = await validator.check_paging(
            "paging.concepts",
            lambda page, size: gateway.list_concepts("e", None, page, size),
        )
    """

    def __init__(self, full_page_size: int = 50):
        self.full_page_size = full_page_size

    async def check_paging(self, name: str, query: PageQuery) -> CheckResult:
        """
        Compare two half pages against one full page.

        Args:
            name: Check name used in the report
            query: Page fetcher taking (page_number, page_size)

        Returns:
            CheckResult: passed, failed (with index and ids of the first
            mismatch per half), skipped when there is too little data, or
            errored when a query failed.
        """
        start_time = time.time()

        def finish(
            outcome: CheckOutcome,
            message: str = "",
            issues: list[Issue] | None = None,
            details: dict | None = None,
        ) -> CheckResult:
            result = CheckResult(
                name=name,
                outcome=outcome,
                message=message,
                issues=issues or [],
                details=details or {},
                execution_time_ms=(time.time() - start_time) * 1000,
            )
            logger.info("Paging check completed", check=name, outcome=outcome.value)
            return result

        try:
            full = await query(1, self.full_page_size)
        except TransportError as e:
            logger.error("Paging query failed", check=name, error=str(e), params=e.params)
            return finish(CheckOutcome.ERRORED, str(e), [Issue.from_transport_error(e)])

        if not full:
            message = "No data returned for the full page; paging cannot be checked"
            return finish(CheckOutcome.SKIPPED, message, [self._inapplicable(message)])

        n = len(full) // 2
        details = {"full_page_size": self.full_page_size, "full_count": len(full), "half_size": n}
        if n == 0:
            message = f"Only {len(full)} record returned; too few to test page slicing"
            return finish(CheckOutcome.SKIPPED, message, [self._inapplicable(message)], details)

        try:
            half1 = list(await query(1, n) or [])
            half2 = list(await query(2, n) or [])
        except TransportError as e:
            logger.error("Paging query failed", check=name, error=str(e), params=e.params)
            return finish(CheckOutcome.ERRORED, str(e), [Issue.from_transport_error(e)], details)

        details["half1_count"] = len(half1)
        details["half2_count"] = len(half2)
        issues: list[Issue] = []

        for page_number, half, offset in ((1, half1, 0), (2, half2, n)):
            mismatch = _first_slice_mismatch(full[offset:offset + n], half, n)
            if mismatch is None:
                continue
            index, expected_id, actual_id = mismatch
            issues.append(
                Issue(
                    issue_type=IssueType.PAGING_MISMATCH,
                    severity=IssueSeverity.ERROR,
                    description=(
                        f"Page {page_number} (size {n}) index {index}: expected {expected_id} "
                        f"(full page index {offset + index}), got {actual_id}"
                    ),
                    details={
                        "page_number": page_number,
                        "page_size": n,
                        "index": index,
                        "full_index": offset + index,
                        "expected_id": expected_id,
                        "actual_id": actual_id,
                    },
                )
            )

        if len(half1) + len(half2) != 2 * n:
            issues.append(
                Issue(
                    issue_type=IssueType.PAGING_COUNT_MISMATCH,
                    severity=IssueSeverity.ERROR,
                    description=(
                        f"Pages 1 and 2 of size {n} returned {len(half1)} + {len(half2)} "
                        f"records, expected {2 * n}"
                    ),
                    details={
                        "expected": 2 * n,
                        "half1_count": len(half1),
                        "half2_count": len(half2),
                    },
                )
            )

        if issues:
            for issue in issues:
                logger.warning("Paging violation", check=name, **issue.details)
            return finish(CheckOutcome.FAILED, "; ".join(i.description for i in issues), issues, details)

        return finish(CheckOutcome.PASSED, details=details)

    @staticmethod
    def _inapplicable(message: str) -> Issue:
        return Issue(
            issue_type=IssueType.INAPPLICABLE,
            severity=IssueSeverity.INFO,
            description=message,
        )
