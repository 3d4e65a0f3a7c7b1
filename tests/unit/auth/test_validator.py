"""Unit tests for GatewayTokenValidator."""

from unittest.mock import MagicMock

import httpx
import pytest

from students.auth import AuthenticatedUser, GatewayTokenValidator, strip_bearer


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock HTTP client."""
    return MagicMock()


@pytest.fixture
def validator(mock_client: MagicMock) -> GatewayTokenValidator:
    """Create a validator with mocked client."""
    validator = GatewayTokenValidator(base_url="http://oauth:8000/")
    validator._client = mock_client
    return validator


def _mock_response(payload: object, status_code: int = 200) -> MagicMock:
    """Create a mock gateway response."""
    response = MagicMock()
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    response.json.return_value = payload
    return response


ACTIVE_PAYLOAD = {
    "active": True,
    "sub": "user-123",
    "username": "ana",
    "preferred_username": "ana.silva",
    "email": "ana@example.com",
    "realm_access": {"roles": ["teacher", "admin"]},
}


@pytest.mark.unit
class TestStripBearer:
    """Tests for strip_bearer."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("BEARER abc", "abc"),
            ("abc", "abc"),
            ("Bearerabc", "Bearerabc"),
        ],
    )
    def test_strip_bearer(self, raw: str, expected: str) -> None:
        """Prefix is removed regardless of case."""
        assert strip_bearer(raw) == expected


@pytest.mark.unit
class TestValidate:
    """Tests for validate."""

    def test_active_token_returns_user(
        self, validator: GatewayTokenValidator, mock_client: MagicMock
    ) -> None:
        """Claims are mapped onto AuthenticatedUser."""
        mock_client.post.return_value = _mock_response(ACTIVE_PAYLOAD)

        user = validator.validate("abc")

        assert user == AuthenticatedUser(
            id="user-123",
            username="ana",
            email="ana@example.com",
            roles=["teacher", "admin"],
        )

    def test_calls_validate_endpoint_with_bearer(
        self, validator: GatewayTokenValidator, mock_client: MagicMock
    ) -> None:
        """POSTs to /api/v1/validate with the stripped token."""
        mock_client.post.return_value = _mock_response(ACTIVE_PAYLOAD)

        validator.validate("Bearer abc")

        mock_client.post.assert_called_once_with(
            "http://oauth:8000/api/v1/validate",
            headers={"Authorization": "Bearer abc"},
        )

    def test_username_falls_back_to_preferred_username(
        self, validator: GatewayTokenValidator, mock_client: MagicMock
    ) -> None:
        """preferred_username is used when username is missing."""
        payload = {**ACTIVE_PAYLOAD, "username": None}
        mock_client.post.return_value = _mock_response(payload)

        user = validator.validate("abc")

        assert user is not None
        assert user.username == "ana.silva"

    def test_missing_claims_default_to_empty(
        self, validator: GatewayTokenValidator, mock_client: MagicMock
    ) -> None:
        """Only 'active' is required."""
        mock_client.post.return_value = _mock_response({"active": True})

        user = validator.validate("abc")

        assert user == AuthenticatedUser(id="", username="", email="", roles=[])

    @pytest.mark.parametrize("payload", [{"active": False}, {"sub": "x"}, [], "active"])
    def test_inactive_or_malformed_payload_returns_none(
        self, validator: GatewayTokenValidator, mock_client: MagicMock, payload: object
    ) -> None:
        """Anything but active=true is invalid."""
        mock_client.post.return_value = _mock_response(payload)

        assert validator.validate("abc") is None

    @pytest.mark.parametrize("status_code", [400, 401, 403, 500, 503])
    def test_non_success_status_returns_none(
        self, validator: GatewayTokenValidator, mock_client: MagicMock, status_code: int
    ) -> None:
        """Gateway rejections are invalid tokens."""
        mock_client.post.return_value = _mock_response(ACTIVE_PAYLOAD, status_code)

        assert validator.validate("abc") is None

    def test_invalid_json_returns_none(
        self, validator: GatewayTokenValidator, mock_client: MagicMock
    ) -> None:
        """Unparseable body is an invalid token."""
        response = _mock_response(None)
        response.json.side_effect = ValueError("not json")
        mock_client.post.return_value = response

        assert validator.validate("abc") is None

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
        ],
    )
    def test_transport_error_returns_none(
        self, validator: GatewayTokenValidator, mock_client: MagicMock, error: Exception
    ) -> None:
        """Unreachable gateway never raises."""
        mock_client.post.side_effect = error

        assert validator.validate("abc") is None

    @pytest.mark.parametrize("token", ["", "Bearer ", "   "])
    def test_empty_token_skips_gateway(
        self, validator: GatewayTokenValidator, mock_client: MagicMock, token: str
    ) -> None:
        """No request for an empty token."""
        assert validator.validate(token) is None
        mock_client.post.assert_not_called()


@pytest.mark.unit
class TestClientLifecycle:
    """Tests for client creation and close."""

    def test_client_created_lazily(self) -> None:
        """httpx.Client is built on first use with the timeout."""
        validator = GatewayTokenValidator(base_url="http://oauth:8000", timeout=2.5)

        client = validator.client

        assert isinstance(client, httpx.Client)
        assert client.timeout == httpx.Timeout(2.5)
        validator.close()

    def test_close_resets_client(self, validator: GatewayTokenValidator) -> None:
        """close() closes and forgets the client."""
        client = validator._client

        validator.close()

        client.close.assert_called_once()
        assert validator._client is None


@pytest.mark.unit
class TestAgainstMockTransport:
    """End-to-end through httpx with a mock transport."""

    def test_real_client_round_trip(self) -> None:
        """Request shape and response parsing with a real httpx.Client."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=ACTIVE_PAYLOAD)

        validator = GatewayTokenValidator(base_url="http://oauth:8000")
        validator._client = httpx.Client(transport=httpx.MockTransport(handler))

        user = validator.validate("Bearer xyz")
        validator.close()

        assert user is not None
        assert user.id == "user-123"
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "http://oauth:8000/api/v1/validate"
        assert seen[0].headers["Authorization"] == "Bearer xyz"

    def test_non_ascii_token_returns_none(self) -> None:
        """A token that cannot be encoded as a header never reaches the gateway."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=ACTIVE_PAYLOAD)

        validator = GatewayTokenValidator(base_url="http://oauth:8000")
        validator._client = httpx.Client(transport=httpx.MockTransport(handler))

        user = validator.validate("Bearer tok\xe9n")
        validator.close()

        assert user is None
        assert seen == []


@pytest.mark.unit
class TestNeverRaises:
    """Unexpected failures are reported as an invalid token."""

    @pytest.mark.parametrize(
        "error",
        [
            RuntimeError("boom"),
            httpx.InvalidURL("bad url"),
            UnicodeEncodeError("ascii", "tok\xe9n", 3, 4, "ordinal not in range"),
        ],
    )
    def test_unexpected_error_returns_none(
        self, validator: GatewayTokenValidator, mock_client: MagicMock, error: Exception
    ) -> None:
        """Anything raised while calling the gateway yields None."""
        mock_client.post.side_effect = error

        assert validator.validate("abc") is None

    def test_error_reading_status_returns_none(
        self, validator: GatewayTokenValidator, mock_client: MagicMock
    ) -> None:
        """Errors after the request is sent are caught too."""
        response = _mock_response(ACTIVE_PAYLOAD)
        response.json.side_effect = httpx.StreamConsumed()
        mock_client.post.return_value = response

        assert validator.validate("abc") is None
