"""HTTP adapter – HttpxHttpClient."""
from __future__ import annotations

from typing import Any

from authz_core.kernel.errors import (
    AuthenticationError,
    BaseError,
    DirectoryUnavailableError,
    NotFoundError,
    PolicyViolationError,
    SerializationError,
    ValidationError,
)


def _require_httpx() -> Any:
    try:
        import httpx  # type: ignore[import-untyped]
        return httpx
    except ImportError as exc:
        raise ImportError("Install 'authz-core[http]' to use the HTTPX adapter") from exc


def _error_body(response: Any) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def map_status_error(service: str, method: str, url: str, response: Any) -> BaseError:
    """Translate a non-2xx response into the kernel error hierarchy."""
    status = response.status_code
    body = _error_body(response)
    message = body.get("message") if isinstance(body.get("message"), str) else None

    if status == 401:
        return AuthenticationError(message or "Invalid credentials")
    if status == 403:
        return PolicyViolationError(message or "Operation not permitted")
    if status in (400, 422):
        errors = body.get("errors")
        return ValidationError(
            message or "Request rejected",
            errors=errors if isinstance(errors, list) else None,
        )
    if status == 404:
        return NotFoundError(message or url)
    return DirectoryUnavailableError(
        service,
        message or f"HTTP {status} from {method} {url}",
        status_code=status,
    )


class HttpxHttpClient:
    """Thin async httpx wrapper that unwraps ``{success, data, message}`` envelopes.

    Every failure surfaces as a kernel error: 401 ->
    :class:`AuthenticationError`, 403 -> :class:`PolicyViolationError`,
    400/422 -> :class:`ValidationError`, 404 -> :class:`NotFoundError`,
    timeouts, transport errors and 5xx -> :class:`DirectoryUnavailableError`.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        service: str = "authz-api",
        **kwargs: Any,
    ) -> None:
        httpx = _require_httpx()
        self._service = service
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, *, token: str | None = None, **kwargs: Any) -> Any:
        return await self._request("GET", url, token=token, **kwargs)

    async def post(self, url: str, *, token: str | None = None, **kwargs: Any) -> Any:
        return await self._request("POST", url, token=token, **kwargs)

    async def put(self, url: str, *, token: str | None = None, **kwargs: Any) -> Any:
        return await self._request("PUT", url, token=token, **kwargs)

    async def _request(self, method: str, url: str, *, token: str | None = None, **kwargs: Any) -> Any:
        """Send a request and return the envelope's ``data`` member."""
        httpx = _require_httpx()
        headers = dict(kwargs.pop("headers", None) or {})
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            raise DirectoryUnavailableError(
                self._service, f"HTTP request timed out: {method} {url}", cause=exc
            ) from exc
        except httpx.HTTPError as exc:
            raise DirectoryUnavailableError(self._service, str(exc) or repr(exc), cause=exc) from exc

        if response.is_error:
            raise map_status_error(self._service, method, url, response)
        return self._unwrap(method, url, response)

    def _unwrap(self, method: str, url: str, response: Any) -> Any:
        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError as exc:
            raise SerializationError(
                f"Non-JSON response from {method} {url}", payload_type="envelope", cause=exc
            ) from exc
        if isinstance(body, dict) and "success" in body:
            if body.get("success") is False:
                raise map_status_error(self._service, method, url, response)
            return body.get("data")
        return body


HttpClient = HttpxHttpClient

__all__ = ["HttpClient", "HttpxHttpClient", "map_status_error"]
