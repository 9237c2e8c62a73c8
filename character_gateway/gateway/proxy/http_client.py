"""
HTTP client for the upstream API.

This module provides the client that performs the single outbound GET behind
``/character``: it composes the resource URL, attaches the secret credential,
enforces a bounded deadline and turns every outcome into a ``FetchResult``.
"""

import asyncio
import time
from typing import Dict, Optional, Tuple

import httpx

from character_gateway import __version__
from character_gateway.config import ApiKeyLocation, Settings, StructuredLogger
from character_gateway.models.proxy import (
    FetchResult,
    ProxyError,
    ProxyErrorKind,
    UpstreamResponse,
)
from character_gateway.utils.helpers import (
    build_upstream_url,
    redact_secret,
    truncate_string,
    validate_resource_path,
)

logger = StructuredLogger(__name__)


class UpstreamClient:
    """Client for one upstream API, shared by all inbound requests."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the upstream client.

        Args:
            settings: Gateway settings (base URL, resource, credential, timeout)
            transport: Optional httpx transport, used to substitute the
                upstream in tests
        """
        self.settings = settings
        self.upstream_host = httpx.URL(settings.upstream_base_url).host
        self.timeout = httpx.Timeout(settings.upstream_timeout)
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=transport,
            event_hooks={"request": [self._strip_credential_off_host]},
            headers={
                "User-Agent": f"character-gateway/{__version__}",
                "Accept": "application/json",
            }
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the pooled HTTP client."""
        await self.client.aclose()

    def resource_url(self, resource: Optional[str] = None) -> str:
        """URL of ``resource`` (default: the configured one), without credential."""
        if resource is None:
            resource = self.settings.upstream_resource
        else:
            resource = validate_resource_path(resource)
        return build_upstream_url(self.settings.upstream_base_url, resource)

    def _credential(self) -> Tuple[Dict[str, str], Dict[str, str]]:
        """Query parameters and headers carrying the credential, if any."""
        params: Dict[str, str] = {}
        headers: Dict[str, str] = {}

        api_key = self.settings.api_key_value()
        if api_key:
            if self.settings.api_key_location == ApiKeyLocation.HEADER:
                headers[self.settings.api_key_name] = api_key
            else:
                params[self.settings.api_key_name] = api_key

        return params, headers

    async def _strip_credential_off_host(self, request: httpx.Request):
        """Drop the credential from requests leaving the upstream host, e.g. redirects."""
        if request.url.host == self.upstream_host:
            return

        name = self.settings.api_key_name
        if name in request.headers:
            del request.headers[name]
        if name in request.url.params:
            request.url = request.url.copy_remove_param(name)

    def _failure(self, kind: ProxyErrorKind, message: str, status_code: Optional[int] = None) -> ProxyError:
        message = redact_secret(message, self.settings.api_key_value())
        return ProxyError(kind=kind, message=truncate_string(message), status_code=status_code)

    async def fetch_resource(self, resource: Optional[str] = None) -> FetchResult:
        """
        Fetch a resource from the upstream API.

        Exactly one GET is issued; there are no retries. The call is bounded
        by ``settings.upstream_timeout`` as an overall deadline in addition to
        the httpx per-phase timeouts.

        Args:
            resource: Resource identifier such as ``characters/583``. Defaults
                to ``settings.upstream_resource``.

        Returns:
            ``UpstreamResponse`` for a 2xx JSON response, otherwise a
            ``ProxyError`` describing the failure.

        Raises:
            ValueError: If ``resource`` is not a valid identifier.
        """
        url = self.resource_url(resource)
        params, headers = self._credential()
        deadline = self.settings.upstream_timeout

        start_time = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self.client.get(url, params=params, headers=headers),
                timeout=deadline
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            result = self._failure(
                ProxyErrorKind.TIMEOUT,
                f"Request to upstream service timed out after {deadline:g}s"
            )
        except httpx.RequestError as e:
            result = self._failure(
                ProxyErrorKind.NETWORK,
                f"Failed to connect to upstream service: {str(e) or type(e).__name__}"
            )
        else:
            elapsed = (time.perf_counter() - start_time) * 1000
            result = self._from_response(response, elapsed)

        response_time = (time.perf_counter() - start_time) * 1000
        logger.log_upstream_call(
            endpoint=url,
            status_code=result.status_code,
            response_time=response_time,
            success=result.ok,
            error=None if result.ok else result.message,
            error_kind=None if result.ok else result.kind.value,
        )
        return result

    def _from_response(self, response: httpx.Response, elapsed_ms: float) -> FetchResult:
        status_code = response.status_code

        if not 200 <= status_code < 300:
            return self._failure(
                ProxyErrorKind.UPSTREAM_STATUS,
                f"Upstream service responded with status {status_code}",
                status_code=status_code
            )

        try:
            return UpstreamResponse.from_body(
                response.content,
                status_code=status_code,
                elapsed_ms=elapsed_ms
            )
        except ValueError:
            return self._failure(
                ProxyErrorKind.INVALID_PAYLOAD,
                "Upstream service returned a body that is not valid JSON",
                status_code=status_code
            )
