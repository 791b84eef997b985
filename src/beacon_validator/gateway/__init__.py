"""
Knowledge Beacon Query Gateway.

Read-only access to the beacon under test:
- Typed record models (concepts, statements, evidence)
- Abstract gateway interface
- HTTP client implementation
"""

from beacon_validator.gateway.base import QueryGateway
from beacon_validator.gateway.client import BeaconClient, create_beacon_client
from beacon_validator.gateway.errors import TransportError
from beacon_validator.gateway.models import (
    Concept,
    ConceptDetail,
    ConceptDetails,
    Evidence,
    IdentifiedEntity,
    Statement,
    StatementEndpoint,
)

__all__ = [
    # Interface
    "QueryGateway",
    "TransportError",
    # HTTP client
    "BeaconClient",
    "create_beacon_client",
    # Models
    "IdentifiedEntity",
    "Concept",
    "ConceptDetail",
    "ConceptDetails",
    "Statement",
    "StatementEndpoint",
    "Evidence",
]
