# ============================================================================
# REACHABILITY PROBE
# ============================================================================
# STATUS: Service - Active liveness probe for HTTP endpoint candidates
# PURPOSE: One bounded-time HTTP request per candidate, status code only
# CREATED: 18 OCT 2026
# EXPORTS: build_probe_url, probe_method, create_probe_client, probe_endpoint
# DEPENDENCIES: httpx
# ============================================================================
"""
Reachability Probe

Sends a single lightweight request (HEAD or OPTIONS) to a candidate's
deployed URL and reports whether anything answered below 500.

Targets are third-party URLs: only the status code is read, redirects
are not followed, and every probe has a hard timeout measured from
request start. A network failure never raises out of probe_endpoint;
it becomes an unreachable ProbeResult carrying the error text.
"""

import asyncio
import time
from typing import Optional

import httpx

from core.config import ProbeDefaults
from core.errors import TransientProbeError
from core.logging import ComponentType, get_logger
from core.models import ProbeResult

logger = get_logger(__name__, ComponentType.PROBE)

NO_APPLICATION_URL = "No application URL configured"
CONNECTION_TIMEOUT = "Connection timeout"
CONNECTION_FAILED = "Connection failed"


def build_probe_url(application_url: str, route_path: Optional[str] = None) -> str:
    """
    Join a base URL and a route path with exactly one separator.

    >>> build_probe_url("https://api.example.com/", "/health")
    'https://api.example.com/health'
    >>> build_probe_url("https://api.example.com", "health")
    'https://api.example.com/health'
    """
    if not route_path:
        return application_url
    if application_url.endswith("/"):
        return application_url + route_path.lstrip("/")
    if route_path.startswith("/"):
        return application_url + route_path
    return f"{application_url}/{route_path}"


def probe_method(method: Optional[str]) -> str:
    """HEAD for GET or undeclared routes, OPTIONS for everything else."""
    if not method or method.strip().upper() == "GET":
        return "HEAD"
    return "OPTIONS"


def create_probe_client(
    defaults: Optional[ProbeDefaults] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the client shared by every probe of one batch."""
    defaults = defaults or ProbeDefaults()
    return httpx.AsyncClient(
        timeout=defaults.timeout_seconds,
        follow_redirects=False,
        verify=defaults.verify_tls,
        headers={"User-Agent": defaults.user_agent},
        transport=transport,
    )


async def _send(
    client: httpx.AsyncClient,
    url: str,
    verb: str,
    timeout_seconds: float,
) -> httpx.Response:
    """Issue the request, translating transport failures into TransientProbeError."""
    try:
        # httpx timeouts are per phase; wait_for bounds the whole request
        return await asyncio.wait_for(
            client.request(verb, url, timeout=timeout_seconds),
            timeout=timeout_seconds,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException):
        raise TransientProbeError(CONNECTION_TIMEOUT, url=url, timed_out=True)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransientProbeError(str(e) or CONNECTION_FAILED, url=url)


async def probe_endpoint(
    client: httpx.AsyncClient,
    application_url: Optional[str],
    route_path: Optional[str] = None,
    method: Optional[str] = None,
    defaults: Optional[ProbeDefaults] = None,
) -> ProbeResult:
    """
    Probe one endpoint.

    Args:
        client: Shared AsyncClient (see create_probe_client)
        application_url: Base URL of the deployed application
        route_path: Path of the route under test
        method: Declared HTTP method of the route
        defaults: Probe configuration

    Returns:
        ProbeResult; never raises for network failures
    """
    if not application_url:
        return ProbeResult.unreachable(NO_APPLICATION_URL)

    defaults = defaults or ProbeDefaults()
    url = build_probe_url(application_url, route_path)
    verb = probe_method(method)

    start_time = time.monotonic()
    try:
        response = await _send(client, url, verb, defaults.timeout_seconds)
    except TransientProbeError as e:
        logger.warning(f"Probe {verb} {url} failed: {e.message}")
        return ProbeResult.unreachable(e.message, url=url)

    response_time_ms = int((time.monotonic() - start_time) * 1000)
    reachable = response.status_code < defaults.server_error_threshold

    logger.debug(
        f"Probe {verb} {url}: {response.status_code} ({response_time_ms}ms)"
    )
    return ProbeResult(
        reachable=reachable,
        url=url,
        status_code=response.status_code,
        response_time_ms=response_time_ms,
    )


__all__ = [
    "build_probe_url",
    "probe_method",
    "create_probe_client",
    "probe_endpoint",
    "NO_APPLICATION_URL",
    "CONNECTION_TIMEOUT",
    "CONNECTION_FAILED",
]
