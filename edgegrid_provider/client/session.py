import json
import logging
from typing import Any, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode

from ansible.module_utils.urls import open_url

from edgegrid_provider.config import ProviderConfig
from edgegrid_provider.errors import ApiError, ApiNotFoundError

logger = logging.getLogger(__name__)


class Session:
    """
    Sends JSON requests to the EdgeGrid API host.

    Every API client shares one session per provider context. The session
    performs exactly one HTTP exchange per call: it neither retries nor backs
    off, and any non-2xx answer is raised as an `ApiError`.
    """

    def __init__(self, config: ProviderConfig):
        """
        Args:
            config: The provider connection settings.
        """
        self.config = config

    def send_request(
        self,
        method: str,
        path: str,
        data: Any = None,
        query_params: Optional[Dict[str, Any]] = None,
        path_params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        A wrapper around open_url that handles API requests robustly.

        Returns:
            The decoded JSON body, or None for an empty response.

        Raises:
            ApiError: the request failed or the API answered with an error.
            ApiNotFoundError: the API answered 404.
        """
        # 1. Handle path parameters safely
        if path_params:
            try:
                path = path.format(
                    **{k: quote(str(v), safe="") for k, v in path_params.items()}
                )
            except KeyError as e:
                raise ApiError(f"Missing required path parameter in API call: {e}")

        # 2. Build the final URL from the configured host
        url = f"{self.config.api_url}/{path.lstrip('/')}"

        # 3. Encode query parameters, turning list values into repeated keys
        params = dict(query_params or {})
        if self.config.account_switch_key:
            params["accountSwitchKey"] = self.config.account_switch_key
        if params:
            encoded_params = []
            for key, value in params.items():
                if value is None:
                    continue
                if isinstance(value, list):
                    for v in value:
                        encoded_params.append((key, v))
                elif isinstance(value, bool):
                    encoded_params.append((key, "true" if value else "false"))
                else:
                    encoded_params.append((key, value))
            if encoded_params:
                url += "?" + urlencode(encoded_params)

        if data is not None and not isinstance(data, str):
            data = json.dumps(data)

        logger.debug("%s %s", method, url)
        try:
            response = open_url(
                url,
                data=data,
                headers={
                    "Authorization": f"token {self.config.access_token}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                method=method,
                timeout=self.config.timeout,
                validate_certs=self.config.validate_certs,
            )
        except HTTPError as e:
            raise self._api_error(method, url, e.code, e.read(), str(e.reason))
        except URLError as e:
            raise ApiError(f"Request to {url} failed: {e.reason}", url=url)

        body_content = response.read()

        # 4. Handle successful responses; 204 and friends carry no body
        if not body_content:
            return None

        try:
            return json.loads(body_content)
        except json.JSONDecodeError:
            raise ApiError(
                f"API returned a success status ({response.status}) but the response was not valid JSON.",
                status=response.status,
                url=url,
            )

    def _api_error(
        self, method: str, url: str, status: int, body_content: bytes, reason: str
    ) -> ApiError:
        """Builds an `ApiError` from a problem-details response, when there is one."""
        title = ""
        detail = ""
        error_details = ""
        if body_content:
            try:
                error_json = json.loads(body_content)
                if isinstance(error_json, dict):
                    title = error_json.get("title", "")
                    detail = error_json.get("detail", "")
                error_details = f"API Response: {json.dumps(error_json)}"
            except json.JSONDecodeError:
                error_details = (
                    f"API Response (raw): {body_content.decode(errors='ignore')}"
                )

        msg = f"{method} {url} failed. Status: {status}. Message: {reason}."
        if error_details:
            msg = f"{msg} {error_details}"
        error_class = ApiNotFoundError if status == 404 else ApiError
        return error_class(msg, status=status, title=title, detail=detail, url=url)
