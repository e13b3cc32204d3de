"""HTTP transport for the reward history API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pycuration._constants import USER_AGENT
from pycuration.config import CurationConfig
from pycuration.exceptions import CurationTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, path: str) -> Any:
        ...


class HttpTransport:
    """JSON-over-HTTP transport bound to the configured base URL."""

    def __init__(
        self,
        config: CurationConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, path: str) -> Any:
        """GET ``{base_url}{path}`` and return the decoded JSON body."""
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        url = f"{self._config.rewards_base_url.rstrip('/')}{path}"

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise CurationTransportError(
                        f"HTTP {resp.status} from {path}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=path,
                    )
        except CurationTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise CurationTransportError(
                f"Request to {path} failed: {exc}",
                endpoint=path,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CurationTransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                endpoint=path,
            ) from exc
