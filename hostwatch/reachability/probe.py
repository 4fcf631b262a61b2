"""One-shot host reachability checks."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union

import aiohttp

from .config import DEFAULT_CHECK_TIMEOUT, DEFAULT_USER_AGENT
from .gate import NetworkGate, SysfsNetworkGate

logger = logging.getLogger(__name__)


class ReachabilityCheck(ABC):
    """Custom liveness check, for hosts with their own way of saying "up".

    Implementations may raise; the probe treats any exception as unreachable.
    """

    @abstractmethod
    def is_host_reachable(self, context: Any, host: Optional[str]) -> bool:
        """Return True if the host is reachable."""
        pass


CustomCheck = Union[ReachabilityCheck, Callable[[Any, Optional[str]], bool]]


def as_check_callable(check: CustomCheck) -> Callable[[Any, Optional[str]], bool]:
    """Normalize a ReachabilityCheck or plain function to a callable."""
    if isinstance(check, ReachabilityCheck):
        return check.is_host_reachable
    if callable(check):
        return check
    raise TypeError(f"Custom check must be a ReachabilityCheck or callable, got {type(check).__name__}")


async def fetch_status(
    url: str,
    timeout: float,
    user_agent: str = DEFAULT_USER_AGENT,
) -> int:
    """Send a single GET request and return the HTTP status code.

    The connection is closed after the request and never pooled.

    Args:
        url: Absolute URL to request.
        timeout: Seconds allowed for connecting, and for each socket read.
        user_agent: Value of the User-Agent header.

    Returns:
        HTTP status code of the response.

    Raises:
        aiohttp.ClientError: On connection failures and invalid URLs.
        asyncio.TimeoutError: If connecting or reading takes too long.
    """
    client_timeout = aiohttp.ClientTimeout(total=None, connect=timeout, sock_read=timeout)
    headers = {"User-Agent": user_agent, "Connection": "close"}
    connector = aiohttp.TCPConnector(force_close=True)

    async with aiohttp.ClientSession(
        connector=connector,
        timeout=client_timeout,
        headers=headers,
    ) as session:
        async with session.get(url) as response:
            return response.status


class ReachabilityProbe:
    """Performs a single reachability check against a host.

    Every failure mode (no network, bad URL, refused connection, timeout,
    non-200 status, a custom check raising) collapses to False.
    """

    def __init__(
        self,
        gate: Optional[NetworkGate] = None,
        timeout: int = DEFAULT_CHECK_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.gate = gate or SysfsNetworkGate()
        self.timeout = timeout
        self.user_agent = user_agent

    def check(
        self,
        host: Optional[str] = None,
        custom_check: Optional[CustomCheck] = None,
        context: Any = None,
        timeout: Optional[int] = None,
    ) -> bool:
        """Check whether a host is reachable right now.

        Blocks for up to the timeout, so call it from a worker thread and
        never from inside a running event loop.

        Args:
            host: Host identifier, a URL for the default HTTP check.
            custom_check: Replaces the HTTP check when given.
            context: Opaque value passed through to the gate and custom check.
            timeout: Overrides the probe's connect timeout, in seconds.

        Returns:
            True if the host is reachable, False otherwise.
        """
        try:
            if not self.gate.has_any_network(context):
                logger.debug(f"No network attached, {host or 'custom check'} is unreachable")
                return False

            if custom_check is not None:
                return bool(as_check_callable(custom_check)(context, host))

            return self._default_check(host, timeout or self.timeout)
        except Exception as e:
            logger.debug(f"Reachability check for {host or 'custom check'} failed: {e!r}")
            return False

    def _default_check(self, host: Optional[str], timeout: int) -> bool:
        if not host:
            logger.debug("No host given for the default reachability check")
            return False

        status = asyncio.run(fetch_status(host, timeout, self.user_agent))
        if status != 200:
            logger.debug(f"{host} answered with HTTP {status}")
        return status == 200


def host_is_reachable(
    host: Optional[str],
    timeout: int = DEFAULT_CHECK_TIMEOUT,
    gate: Optional[NetworkGate] = None,
    custom_check: Optional[CustomCheck] = None,
    context: Any = None,
) -> bool:
    """Check once whether a host is reachable.

    Blocking; see ReachabilityProbe.check.

    Example:
        if host_is_reachable("https://api.example.com"):
            print("API is up")
    """
    probe = ReachabilityProbe(gate=gate, timeout=timeout)
    return probe.check(host, custom_check=custom_check, context=context)
