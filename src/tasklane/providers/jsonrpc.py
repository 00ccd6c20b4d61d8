import asyncio
import itertools
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from tasklane.config.model import NetworkConfig
from tasklane.runtime.exceptions import ProviderRequestError

logger = logging.getLogger(__name__)


class JsonRpcProvider:
    """
    Base class of the JSON-RPC 2.0 providers a network is reached through.
    Connections are opened on the first request, not on construction.
    """

    def __init__(self, network_name: str, config: NetworkConfig):
        self.network_name = network_name
        self.endpoint = config.endpoint
        self.timeout = config.timeout
        self.types = config.types
        self._ids = itertools.count(1)

    async def send(self, method: str, params: Optional[List[Any]] = None) -> Any:
        raise NotImplementedError

    async def close(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _build_request(self, method: str, params: Optional[List[Any]]) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params or []),
        }

    def _unwrap(self, method: str, response: Any) -> Any:
        if not isinstance(response, dict):
            raise ProviderRequestError(method, f"malformed response {response!r}")
        if response.get("error") is not None:
            raise ProviderRequestError(method, response["error"])
        return response.get("result")

    def __repr__(self):
        return f"<{type(self).__name__} {self.network_name} {self.endpoint}>"


class HttpProvider(JsonRpcProvider):
    def __init__(self, network_name: str, config: NetworkConfig):
        super().__init__(network_name, config)
        self._session: Optional[aiohttp.ClientSession] = None

    async def send(self, method: str, params: Optional[List[Any]] = None) -> Any:
        session = self._get_session()
        payload = self._build_request(method, params)
        logger.debug("POST %s %s", self.endpoint, method)

        try:
            async with session.post(self.endpoint, json=payload) as response:
                if response.status >= 400:
                    raise ProviderRequestError(method, f"HTTP {response.status}")
                body = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderRequestError(method, e) from e
        except json.JSONDecodeError as e:
            raise ProviderRequestError(method, f"invalid JSON response: {e}") from e

        return self._unwrap(method, body)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session


class WsProvider(JsonRpcProvider):
    def __init__(self, network_name: str, config: NetworkConfig):
        super().__init__(network_name, config)
        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        if self._ws is not None and not self._ws.closed:
            return

        logger.debug("Connecting to %s", self.endpoint)
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        try:
            self._ws = await self._session.ws_connect(self.endpoint)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderRequestError("connect", e) from e

    async def send(self, method: str, params: Optional[List[Any]] = None) -> Any:
        # One request in flight at a time; unrelated messages are skipped.
        async with self._lock:
            await self.connect()
            payload = self._build_request(method, params)
            await self._ws.send_json(payload)

            while True:
                try:
                    message = await self._ws.receive(timeout=self.timeout)
                except asyncio.TimeoutError as e:
                    raise ProviderRequestError(method, "timed out") from e

                if message.type == aiohttp.WSMsgType.TEXT:
                    try:
                        data = json.loads(message.data)
                    except json.JSONDecodeError as e:
                        raise ProviderRequestError(
                            method, f"invalid JSON response: {e}"
                        ) from e
                    if isinstance(data, dict) and data.get("id") == payload["id"]:
                        return self._unwrap(method, data)
                elif message.type in (
                    aiohttp.WSMsgType.CLOSE,
                    aiohttp.WSMsgType.CLOSED,
                    aiohttp.WSMsgType.ERROR,
                ):
                    raise ProviderRequestError(method, "connection closed")

    async def close(self) -> None:
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._session is not None:
            await self._session.close()
            self._session = None
