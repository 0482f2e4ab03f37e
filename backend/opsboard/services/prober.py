"""Prober service - one bounded-time HTTPS GET per site."""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeOutcome:
    """Raw result of a probe, before classification."""
    reached: bool
    status_code: int = 0  # 0 when unreached
    elapsed_ms: int = 0
    error: Optional[str] = None  # Failure description, for logs only

    @classmethod
    def unreached(cls, elapsed_ms: int, error: Optional[str] = None) -> "ProbeOutcome":
        return cls(reached=False, status_code=0, elapsed_ms=max(0, elapsed_ms), error=error)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class ProberService:
    """Issues liveness probes.

    The caller owns the httpx client for the duration of a pass so that
    connections are pooled across sites; `client()` builds one with the
    right timeout, headers and connection limit.
    """

    def __init__(
        self,
        timeout_ms: int = 10_000,
        user_agent: str = DEFAULT_USER_AGENT,
        max_connections: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout_ms = timeout_ms
        self.user_agent = user_agent
        self.max_connections = max_connections
        self.transport = transport

    def client(self) -> httpx.AsyncClient:
        """Create an HTTP client configured for probing."""
        return httpx.AsyncClient(
            timeout=self.timeout_ms / 1000,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            limits=httpx.Limits(max_connections=self.max_connections),
            transport=self.transport,
        )

    async def probe(
        self,
        client: httpx.AsyncClient,
        domain: str,
        timeout_ms: Optional[int] = None,
    ) -> ProbeOutcome:
        """Probe https://<domain> once.

        Any HTTP response inside the deadline counts as reached, whatever its
        status. The deadline covers the whole exchange up to the response
        headers; the body is never read.
        """
        deadline_ms = timeout_ms if timeout_ms is not None else self.timeout_ms
        url = f"https://{domain}"
        start = time.monotonic()

        try:
            request = client.build_request("GET", url)
            response = await asyncio.wait_for(
                client.send(request, stream=True),
                timeout=deadline_ms / 1000,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return ProbeOutcome.unreached(
                min(_elapsed_ms(start), deadline_ms),
                "Request timeout",
            )
        except httpx.HTTPError as e:
            return ProbeOutcome.unreached(_elapsed_ms(start), f"Connection error: {e}")
        except Exception as e:
            # Invalid URLs and anything else the transport raises
            return ProbeOutcome.unreached(_elapsed_ms(start), str(e) or type(e).__name__)

        elapsed = _elapsed_ms(start)
        await response.aclose()
        return ProbeOutcome(reached=True, status_code=response.status_code, elapsed_ms=elapsed)
