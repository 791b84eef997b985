"""
Knowledge Beacon HTTP Client.

QueryGateway implementation over the Knowledge Beacon REST API.
"""

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from beacon_validator.config.settings import BeaconSettings, get_settings
from beacon_validator.gateway.base import QueryGateway
from beacon_validator.gateway.errors import TransportError
from beacon_validator.gateway.models import Concept, ConceptDetails, Evidence, Statement

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _encode_path(identifier: str) -> str:
    """URL-encode a CURIE for use as a path segment."""
    return quote(identifier, safe="")


class BeaconClient(QueryGateway):
    """Client for the Knowledge Beacon API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        api_token: str | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        # Environment settings fill only the arguments left out
        if base_url is None or timeout_seconds is None or user_agent is None:
            settings = get_settings().beacon
            base_url = base_url or settings.base_url
            timeout_seconds = timeout_seconds or settings.timeout_seconds
            user_agent = user_agent or settings.user_agent
            if api_token is None and settings.api_token is not None:
                api_token = settings.api_token.get_secret_value()

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._api_token = api_token
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: BeaconSettings) -> "BeaconClient":
        """Build a client from beacon settings."""
        return cls(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            api_token=settings.api_token.get_secret_value() if settings.api_token else None,
            user_agent=settings.user_agent,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json", "User-Agent": self.user_agent}
            if self._api_token:
                headers["Authorization"] = f"Bearer {self._api_token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=httpx.Timeout(self.timeout_seconds),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BeaconClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Request Helpers
    # =========================================================================

    async def _get_json(
        self,
        operation: str,
        path: str,
        params: dict[str, Any],
        query_params: dict[str, Any] | None = None,
    ) -> Any:
        """
        GET a path and decode its JSON body.

        Args:
            operation: Gateway operation name (for diagnostics)
            path: Request path relative to the base URL
            params: Operation parameters as the caller supplied them
            query_params: HTTP query parameters; None values are dropped

        Raises:
            TransportError: on connection errors, timeouts, non-2xx status or
                an undecodable body
        """
        client = await self._get_client()
        query = {k: v for k, v in (query_params or {}).items() if v is not None}

        try:
            response = await client.get(path, params=query)
        except httpx.HTTPError as e:
            logger.error(
                "Beacon request failed",
                operation=operation,
                params=params,
                error=str(e),
            )
            raise TransportError(
                operation,
                params,
                f"{type(e).__name__}: {e}",
                url=f"{self.base_url}{path}",
            ) from e

        url = str(response.request.url)
        logger.debug("Beacon response received", operation=operation, url=url, status=response.status_code)

        if response.is_error:
            logger.error(
                "Beacon HTTP error",
                operation=operation,
                params=params,
                status=response.status_code,
            )
            raise TransportError(
                operation,
                params,
                response.text[:200] or response.reason_phrase,
                status_code=response.status_code,
                url=url,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                operation,
                params,
                f"Response is not valid JSON: {e}",
                status_code=response.status_code,
                url=url,
            ) from e

    def _parse_list(
        self,
        operation: str,
        params: dict[str, Any],
        payload: Any,
        model: type[ModelT],
        extra: dict[str, Any] | None = None,
    ) -> list[ModelT]:
        """Validate a JSON array of records against a model."""
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise TransportError(
                operation,
                params,
                f"Expected a JSON array, got {type(payload).__name__}",
            )

        try:
            if extra:
                return [model.model_validate({**item, **extra}) for item in payload]
            return [model.model_validate(item) for item in payload]
        except (ValidationError, TypeError) as e:
            raise TransportError(operation, params, f"Malformed record: {e}") from e

    # =========================================================================
    # Gateway Operations
    # =========================================================================

    async def list_concepts(
        self,
        keywords: str,
        semantic_group: str | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> list[Concept]:
        params = {
            "keywords": keywords,
            "semantic_group": semantic_group,
            "page_number": page_number,
            "page_size": page_size,
        }
        payload = await self._get_json(
            "list_concepts",
            "/concepts",
            params,
            {
                "keywords": keywords,
                "semgroups": semantic_group,
                "pageNumber": page_number,
                "pageSize": page_size,
            },
        )
        return self._parse_list("list_concepts", params, payload, Concept)

    async def get_concept_details(self, concept_id: str) -> list[ConceptDetails]:
        params = {"concept_id": concept_id}
        payload = await self._get_json(
            "get_concept_details",
            f"/concepts/{_encode_path(concept_id)}",
            params,
        )
        return self._parse_list("get_concept_details", params, payload, ConceptDetails)

    async def list_statements(
        self,
        concept_ids: list[str],
        page_number: int = 1,
        page_size: int = 10,
        keywords: str | None = None,
        semantic_group: str | None = None,
    ) -> list[Statement]:
        params = {
            "concept_ids": list(concept_ids),
            "page_number": page_number,
            "page_size": page_size,
            "keywords": keywords,
            "semantic_group": semantic_group,
        }
        payload = await self._get_json(
            "list_statements",
            "/statements",
            params,
            {
                "c": ",".join(concept_ids),
                "pageNumber": page_number,
                "pageSize": page_size,
                "keywords": keywords,
                "semgroups": semantic_group,
            },
        )
        return self._parse_list("list_statements", params, payload, Statement)

    async def list_evidence(
        self,
        statement_id: str,
        keywords: str | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> list[Evidence]:
        params = {
            "statement_id": statement_id,
            "keywords": keywords,
            "page_number": page_number,
            "page_size": page_size,
        }
        payload = await self._get_json(
            "list_evidence",
            f"/evidence/{_encode_path(statement_id)}",
            params,
            {
                "keywords": keywords,
                "pageNumber": page_number,
                "pageSize": page_size,
            },
        )
        return self._parse_list(
            "list_evidence", params, payload, Evidence, extra={"statement_id": statement_id}
        )

    async def list_exact_matches(self, concept_id: str) -> set[str]:
        params = {"concept_id": concept_id}
        payload = await self._get_json(
            "list_exact_matches",
            f"/exactmatches/{_encode_path(concept_id)}",
            params,
        )
        if payload is None:
            return set()
        if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
            raise TransportError(
                "list_exact_matches",
                params,
                "Expected a JSON array of concept identifiers",
            )
        return set(payload)


def create_beacon_client(settings: BeaconSettings | None = None) -> BeaconClient:
    """
    Create a beacon client.

    Args:
        settings: Beacon settings (defaults to the environment)

    Returns:
        Configured BeaconClient instance
    """
    return BeaconClient.from_settings(settings or get_settings().beacon)
