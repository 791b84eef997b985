"""
CLI entry point for beacon validation.

Runs the conformance suite against one beacon and prints the report as JSON.
Exit status is 1 when a check failed or the run was aborted.
"""

import argparse
import asyncio
import json
import sys

import structlog

from beacon_validator.config.settings import Settings, get_settings
from beacon_validator.gateway.client import create_beacon_client
from beacon_validator.observability.logging import configure_logging
from beacon_validator.validation.results import ValidationReport
from beacon_validator.validation.runner import ValidationRunner

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beacon-validator",
        description="Validate a Knowledge Beacon against the beacon API invariants",
    )
    parser.add_argument("--base-url", help="Beacon base URL (default: BEACON_BASE_URL)")
    parser.add_argument("--keywords", help="Keyword filter for concept searches (default: VALIDATOR_KEYWORDS)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        help="Log output format (default: OBSERVABILITY_LOG_FORMAT)",
    )
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        default=None,
        help="Exit non-zero when a check errored because the beacon could not be queried",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command-line values applied."""
    beacon = settings.beacon
    validator = settings.validator
    observability = settings.observability

    if args.base_url:
        beacon = beacon.model_copy(update={"base_url": args.base_url})
    if args.keywords:
        validator = validator.model_copy(update={"keywords": args.keywords})
    if args.fail_on_error:
        validator = validator.model_copy(update={"fail_on_error": True})
    if args.log_format:
        observability = observability.model_copy(update={"log_format": args.log_format})

    update = {"beacon": beacon, "validator": validator, "observability": observability}
    if args.log_level:
        update["log_level"] = args.log_level
    return settings.model_copy(update=update)


async def run(settings: Settings) -> ValidationReport:
    """Run the suite against the configured beacon."""
    async with create_beacon_client(settings.beacon) as gateway:
        runner = ValidationRunner(gateway, settings.validator)
        return await runner.run_all()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)

    configure_logging(
        level=settings.log_level,
        format=settings.observability.log_format,
        service_name=settings.app_name,
    )
    logger.info("Validating beacon", base_url=settings.beacon.base_url)

    report = asyncio.run(run(settings))
    print(json.dumps(report.to_dict(), indent=2))
    return report.exit_code(fail_on_error=settings.validator.fail_on_error)


if __name__ == "__main__":
    sys.exit(main())
