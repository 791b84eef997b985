"""
Knowledge Beacon Validator.

Conformance checks for Knowledge Beacon web services: workflow chaining,
paging consistency and semantic group filtering.
"""

__version__ = "0.1.0"

__all__: list[str] = ["__version__"]
