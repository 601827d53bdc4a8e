"""HTTP client helpers for the site API."""

from typing import Any

import httpx

from .config import ClientSettings


class ApiResponseError(Exception):
    """Raised when the API answers with success=false or a body that is not an envelope."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


def create_http_client(settings: ClientSettings) -> httpx.AsyncClient:
    """Create the client shared by every store."""
    # Trailing slash so relative paths like "version" join under /api/
    return httpx.AsyncClient(
        base_url=settings.api_url.rstrip("/") + "/",
        timeout=settings.request_timeout,
        headers={"Accept": "application/json"},
    )


def _unwrap(response: httpx.Response) -> Any:
    """Raise for HTTP errors and return the envelope's data field."""
    response.raise_for_status()
    try:
        body = response.json()
    except ValueError as e:
        raise ApiResponseError("Response is not JSON", response.status_code) from e
    if not isinstance(body, dict) or "success" not in body:
        raise ApiResponseError("Response is not an API envelope", response.status_code)
    if not body["success"]:
        raise ApiResponseError(body.get("message") or "Request failed", response.status_code)
    return body.get("data")


async def api_get(
    client: httpx.AsyncClient,
    path: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """Make a GET request to the API and return the envelope data."""
    response = await client.get(path, params=params)
    return _unwrap(response)


async def api_post(
    client: httpx.AsyncClient,
    path: str,
    json: dict[str, Any] | None = None,
) -> Any:
    """Make a POST request to the API and return the envelope data."""
    response = await client.post(path, json=json)
    return _unwrap(response)


async def api_put(
    client: httpx.AsyncClient,
    path: str,
    json: dict[str, Any] | list[Any],
) -> Any:
    """Make a PUT request to the API and return the envelope data."""
    response = await client.put(path, json=json)
    return _unwrap(response)


async def api_delete(client: httpx.AsyncClient, path: str) -> Any:
    """Make a DELETE request to the API and return the envelope data."""
    response = await client.delete(path)
    return _unwrap(response)


async def get_versions(client: httpx.AsyncClient) -> dict[str, str]:
    """Fetch the server's current version stamp of each resource."""
    data = await api_get(client, "version")
    if not isinstance(data, dict):
        raise ApiResponseError("Version response has no data object")
    return {str(name): str(value) for name, value in data.items()}


def error_message(e: Exception, default: str) -> str:
    """Best human-readable message for a failed API call."""
    if isinstance(e, ApiResponseError):
        return str(e) or default
    if isinstance(e, httpx.HTTPStatusError):
        try:
            body = e.response.json()
        except ValueError:
            return default
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
    return default
