import io
import json
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest

from edgegrid_provider.client.appsec import (
    AppSecHttpClient,
    GetReputationProfilesRequest,
)
from edgegrid_provider.client.session import Session
from edgegrid_provider.config import ProviderConfig
from edgegrid_provider.errors import ApiError, ApiNotFoundError
from edgegrid_provider.helpers import AUTH_FIXTURE

API_URL = AUTH_FIXTURE["api_url"]


def response(body=b"", status=200):
    mock = MagicMock()
    mock.read.return_value = body
    mock.status = status
    return mock


def http_error(status, body):
    return HTTPError(
        f"{API_URL}/appsec/v1/configs/1", status, "Error", {}, io.BytesIO(body)
    )


@pytest.fixture
def session():
    return Session(ProviderConfig(**AUTH_FIXTURE))


class TestSession:
    @patch("edgegrid_provider.client.session.open_url")
    def test_get_with_path_and_query_params(self, mock_open_url, session):
        # Arrange
        mock_open_url.return_value = response(b'{"configId": 43253}')

        # Act
        body = session.send_request(
            "GET",
            "/appsec/v1/configs/{config_id}/versions",
            query_params={"page": None, "detail": True, "ids": [1, 2]},
            path_params={"config_id": 43253},
        )

        # Assert
        assert body == {"configId": 43253}
        url = mock_open_url.call_args.args[0]
        assert url == f"{API_URL}/appsec/v1/configs/43253/versions?detail=true&ids=1&ids=2"
        kwargs = mock_open_url.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["data"] is None
        assert kwargs["timeout"] == 30
        assert kwargs["headers"]["Authorization"] == f"token {AUTH_FIXTURE['access_token']}"

    @patch("edgegrid_provider.client.session.open_url")
    def test_account_switch_key_is_sent(self, mock_open_url):
        mock_open_url.return_value = response(b"[]")
        config = ProviderConfig(**dict(AUTH_FIXTURE, account_switch_key="1-ABCDE"))

        Session(config).send_request("GET", "/identity-management/v2/user-admin/groups")

        url = mock_open_url.call_args.args[0]
        assert url.endswith("/groups?accountSwitchKey=1-ABCDE")

    @patch("edgegrid_provider.client.session.open_url")
    def test_body_is_sent_as_json(self, mock_open_url, session):
        mock_open_url.return_value = response()

        result = session.send_request("PUT", "/x", data={"applyRateControls": True})

        assert result is None
        assert json.loads(mock_open_url.call_args.kwargs["data"]) == {
            "applyRateControls": True
        }

    @patch("edgegrid_provider.client.session.open_url")
    def test_not_found(self, mock_open_url, session):
        mock_open_url.side_effect = http_error(
            404, b'{"title": "Not Found", "detail": "config 1 does not exist"}'
        )

        with pytest.raises(ApiNotFoundError) as exc_info:
            session.send_request("GET", "/appsec/v1/configs/1")

        error = exc_info.value
        assert error.status == 404
        assert error.title == "Not Found"
        assert error.detail == "config 1 does not exist"
        assert "config 1 does not exist" in str(error)

    @patch("edgegrid_provider.client.session.open_url")
    def test_server_error_with_raw_body(self, mock_open_url, session):
        mock_open_url.side_effect = http_error(502, b"<html>Bad Gateway</html>")

        with pytest.raises(ApiError) as exc_info:
            session.send_request("GET", "/appsec/v1/configs/1")

        assert not isinstance(exc_info.value, ApiNotFoundError)
        assert exc_info.value.status == 502
        assert "Bad Gateway" in str(exc_info.value)

    @patch("edgegrid_provider.client.session.open_url")
    def test_connection_failure(self, mock_open_url, session):
        mock_open_url.side_effect = URLError("connection refused")

        with pytest.raises(ApiError) as exc_info:
            session.send_request("GET", "/x")

        assert exc_info.value.status is None
        assert "connection refused" in str(exc_info.value)

    @patch("edgegrid_provider.client.session.open_url")
    def test_invalid_json_body(self, mock_open_url, session):
        mock_open_url.return_value = response(b"not json")

        with pytest.raises(ApiError):
            session.send_request("GET", "/x")

    def test_missing_path_parameter(self, session):
        with pytest.raises(ApiError):
            session.send_request("GET", "/configs/{config_id}", path_params={"other": 1})

    @patch("edgegrid_provider.client.session.open_url")
    def test_path_parameters_are_percent_encoded(self, mock_open_url, session):
        # Arrange
        mock_open_url.return_value = response(b"{}")

        # Act
        session.send_request(
            "GET",
            "/appsec/v1/configs/{config_id}/versions/{version}/security-policies/{policy_id}",
            path_params={"config_id": 43253, "version": 7, "policy_id": "a/b?c#d e"},
        )

        # Assert
        url = mock_open_url.call_args.args[0]
        assert url == (
            f"{API_URL}/appsec/v1/configs/43253/versions/7/security-policies/a%2Fb%3Fc%23d%20e"
        )


class TestAppSecHttpClient:
    @patch("edgegrid_provider.client.session.open_url")
    def test_get_reputation_profiles(self, mock_open_url, session):
        # Arrange
        mock_open_url.return_value = response(
            b'{"reputationProfiles": [{"id": 12345, "name": "Bad clients", "threshold": 5}]}'
        )
        client = AppSecHttpClient(session)

        # Act
        result = client.get_reputation_profiles(
            GetReputationProfilesRequest(config_id=43253, version=7)
        )

        # Assert
        url = mock_open_url.call_args.args[0]
        assert url == f"{API_URL}/appsec/v1/configs/43253/versions/7/reputation-profiles"
        assert [(p.id, p.name) for p in result.reputation_profiles] == [
            (12345, "Bad clients")
        ]
