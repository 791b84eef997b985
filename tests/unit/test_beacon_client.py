"""
Unit Tests for Beacon Client.

Tests the HTTP binding of the gateway operations using httpx.MockTransport.
"""

from unittest.mock import patch

import httpx
import pytest

from beacon_validator.config.settings import BeaconSettings
from beacon_validator.gateway.client import BeaconClient, create_beacon_client
from beacon_validator.gateway.errors import TransportError
from beacon_validator.gateway.models import ConceptDetails

BASE_URL = "http://beacon.test/api"


def make_client(handler, **kwargs) -> BeaconClient:
    return BeaconClient(base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


class Recorder:
    """Handler that records requests and replies with a fixed response."""

    def __init__(self, status_code: int = 200, **kwargs):
        self.status_code = status_code
        self.kwargs = kwargs
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class TestBeaconClientRequests:
    """Test the requests issued for each gateway operation."""

    @pytest.mark.asyncio
    async def test_list_concepts_query_parameters(self) -> None:
        """Test the concept search path and parameter names."""
        recorder = Recorder(200, json=[])

        async with make_client(recorder) as client:
            await client.list_concepts("alcohol", "GENE", 2, 25)

        request = recorder.last
        assert request.method == "GET"
        assert request.url.path == "/api/concepts"
        assert dict(request.url.params) == {
            "keywords": "alcohol",
            "semgroups": "GENE",
            "pageNumber": "2",
            "pageSize": "25",
        }

    @pytest.mark.asyncio
    async def test_absent_filters_are_omitted(self) -> None:
        """Test that None parameters are not sent."""
        recorder = Recorder(200, json=[])

        async with make_client(recorder) as client:
            await client.list_concepts("e")

        assert "semgroups" not in recorder.last.url.params

    @pytest.mark.asyncio
    async def test_list_statements_joins_concept_ids(self) -> None:
        """Test that concept ids are sent as one comma separated parameter."""
        recorder = Recorder(200, json=[])

        async with make_client(recorder) as client:
            await client.list_statements(["CHEBI:16236", "NCBIGene:124"], 1, 50, None, "DISO")

        params = recorder.last.url.params
        assert recorder.last.url.path == "/api/statements"
        assert params["c"] == "CHEBI:16236,NCBIGene:124"
        assert params["semgroups"] == "DISO"
        assert "keywords" not in params

    @pytest.mark.asyncio
    async def test_identifiers_are_path_encoded(self) -> None:
        """Test that identifiers are URL-encoded as a single path segment."""
        recorder = Recorder(200, json=[])

        async with make_client(recorder) as client:
            await client.get_concept_details("CHEBI:16236")
            await client.list_evidence("SEMMED/1", None, 1, 10)

        assert recorder.requests[0].url.path == "/api/concepts/CHEBI:16236"
        assert b"SEMMED%2F1" in recorder.requests[1].url.raw_path
        assert recorder.requests[1].url.params["pageSize"] == "10"

    @pytest.mark.asyncio
    async def test_bearer_token_header(self) -> None:
        """Test that a configured token is sent as a bearer token."""
        recorder = Recorder(200, json=[])

        async with make_client(recorder, api_token="secret-token") as client:
            await client.list_exact_matches("CHEBI:16236")

        assert recorder.last.headers["Authorization"] == "Bearer secret-token"
        assert recorder.last.url.path == "/api/exactmatches/CHEBI:16236"


class TestBeaconClientResponses:
    """Test decoding of beacon responses."""

    @pytest.mark.asyncio
    async def test_concepts_are_parsed(self) -> None:
        """Test that camelCase fields map onto the concept model."""
        body = [{"id": "NCBIGene:124", "name": "ADH1B", "semanticGroup": "GENE", "extra": 1}]

        async with make_client(Recorder(200, json=body)) as client:
            concepts = await client.list_concepts("adh")

        assert concepts[0].id == "NCBIGene:124"
        assert concepts[0].semantic_group == "GENE"

    @pytest.mark.asyncio
    async def test_concept_details_are_parsed(self) -> None:
        """Test parsing of the detailed concept record."""
        body = [{"id": "CHEBI:16236", "semanticGroup": "CHEM", "details": [{"tag": "mass", "value": "46"}]}]

        async with make_client(Recorder(200, json=body)) as client:
            details = await client.get_concept_details("CHEBI:16236")

        assert isinstance(details[0], ConceptDetails)
        assert details[0].details[0].value == "46"

    @pytest.mark.asyncio
    async def test_statements_are_parsed(self) -> None:
        """Test parsing of statement endpoints."""
        body = [
            {
                "id": "SEMMED:1",
                "subject": {"id": "CHEBI:16236", "name": "ethanol", "semanticGroup": "CHEM"},
                "predicate": {"id": "RO:0002434", "name": "interacts with"},
                "object": {"id": "NCBIGene:124", "name": "ADH1B", "semanticGroup": "GENE"},
            }
        ]

        async with make_client(Recorder(200, json=body)) as client:
            statements = await client.list_statements(["CHEBI:16236"])

        assert statements[0].other_endpoint(["CHEBI:16236"]).id == "NCBIGene:124"

    @pytest.mark.asyncio
    async def test_evidence_is_stamped_with_statement_id(self) -> None:
        """Test that evidence records carry the statement they were requested for."""
        body = [{"id": "PMID:1", "label": "a"}, {"id": "PMID:2", "label": "b"}]

        async with make_client(Recorder(200, json=body)) as client:
            evidence = await client.list_evidence("SEMMED:1")

        assert [e.statement_id for e in evidence] == ["SEMMED:1", "SEMMED:1"]

    @pytest.mark.asyncio
    async def test_null_and_empty_bodies_are_empty_lists(self) -> None:
        """Test that a null or empty body means no records."""
        async with make_client(Recorder(200, content=b"null")) as client:
            assert await client.list_concepts("e") == []

        async with make_client(Recorder(204)) as client:
            assert await client.list_statements(["CHEBI:16236"]) == []
            assert await client.list_exact_matches("CHEBI:16236") == set()

    @pytest.mark.asyncio
    async def test_exact_matches_are_a_set(self) -> None:
        """Test that duplicate exact matches collapse."""
        body = ["DRUGBANK:DB00898", "MESH:D000431", "DRUGBANK:DB00898"]

        async with make_client(Recorder(200, json=body)) as client:
            matches = await client.list_exact_matches("CHEBI:16236")

        assert matches == {"DRUGBANK:DB00898", "MESH:D000431"}


class TestBeaconClientErrors:
    """Test conversion of failures into TransportError."""

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        """Test that a non-2xx response carries status and parameters."""
        async with make_client(Recorder(500, text="internal error")) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.list_concepts("e", "GENE", 1, 50)

        error = exc_info.value
        assert error.operation == "list_concepts"
        assert error.status_code == 500
        assert error.params == {
            "keywords": "e",
            "semantic_group": "GENE",
            "page_number": 1,
            "page_size": 50,
        }
        assert "internal error" in error.message
        assert error.url.startswith(f"{BASE_URL}/concepts")

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        """Test that a connection failure becomes a TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.get_concept_details("CHEBI:16236")

        assert exc_info.value.status_code is None
        assert "ConnectError" in exc_info.value.message
        assert exc_info.value.params == {"concept_id": "CHEBI:16236"}

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        """Test that an undecodable body is a transport failure."""
        async with make_client(Recorder(200, content=b"<html>not json</html>")) as client:
            with pytest.raises(TransportError, match="not valid JSON"):
                await client.list_evidence("SEMMED:1")

    @pytest.mark.asyncio
    async def test_malformed_record(self) -> None:
        """Test that a record without an id is rejected."""
        body = [{"name": "ethanol"}]

        async with make_client(Recorder(200, json=body)) as client:
            with pytest.raises(TransportError, match="Malformed record"):
                await client.list_concepts("e")

    @pytest.mark.asyncio
    async def test_object_instead_of_array(self) -> None:
        """Test that a JSON object where an array is expected is rejected."""
        body = {"id": "CHEBI:16236"}

        async with make_client(Recorder(200, json=body)) as client:
            with pytest.raises(TransportError, match="Expected a JSON array"):
                await client.get_concept_details("CHEBI:16236")

    @pytest.mark.asyncio
    async def test_exact_matches_must_be_strings(self) -> None:
        """Test that exact matches must be an array of identifiers."""
        body = [{"id": "MESH:D000431"}]

        async with make_client(Recorder(200, json=body)) as client:
            with pytest.raises(TransportError):
                await client.list_exact_matches("CHEBI:16236")


class TestClientFactory:
    """Test client construction from settings."""

    @pytest.mark.asyncio
    async def test_create_from_settings(self) -> None:
        """Test that beacon settings configure the client."""
        settings = BeaconSettings(
            base_url="https://beacon.example.org/api/",
            timeout_seconds=12,
            api_token="tok",
        )

        client = create_beacon_client(settings)

        assert client.base_url == "https://beacon.example.org/api"
        assert client.timeout_seconds == 12
        http_client = await client._get_client()
        assert http_client.headers["Authorization"] == "Bearer tok"
        await client.close()
        assert client._client is None

    def test_defaults_come_from_environment(self, test_settings) -> None:
        """Test that settings loaded from the environment reach the client."""
        client = create_beacon_client(test_settings.beacon)

        assert client.base_url == "http://beacon.test/api"
        assert client.timeout_seconds == 5

    def test_explicit_settings_do_not_read_environment(self) -> None:
        """Test that a fully specified client ignores unrelated environment settings."""
        settings = BeaconSettings(base_url="https://beacon.example.org/api", timeout_seconds=3)

        with patch(
            "beacon_validator.gateway.client.get_settings",
            side_effect=RuntimeError("invalid VALIDATOR_PAGING_PAGE_SIZE"),
        ) as get_settings:
            client = create_beacon_client(settings)

        get_settings.assert_not_called()
        assert client.base_url == "https://beacon.example.org/api"
        assert client.timeout_seconds == 3
        assert client.user_agent == "beacon-validator"
