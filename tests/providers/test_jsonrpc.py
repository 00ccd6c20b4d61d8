import pytest
import pytest_asyncio
import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer

from tasklane.config.model import NetworkConfig
from tasklane.providers import HttpProvider, WsProvider
from tasklane.runtime.exceptions import ProviderRequestError

# Mark all tests in this module to be skipped if aiohttp is not installed
pytest.importorskip("aiohttp")


def _answer(request_body):
    if request_body["method"] == "system_chain":
        return {"jsonrpc": "2.0", "id": request_body["id"], "result": "Development"}
    return {
        "jsonrpc": "2.0",
        "id": request_body["id"],
        "error": {"code": -32601, "message": "Method not found"},
    }


@pytest_asyncio.fixture
async def rpc_server():
    async def http_handler(request):
        return web.json_response(_answer(await request.json()))

    async def html_handler(request):
        return web.Response(text="<html>oops</html>")

    async def ws_handler(request):
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        async for message in ws:
            if message.type == aiohttp.WSMsgType.TEXT:
                body = message.json()
                # An unrelated notification first, it has to be skipped.
                await ws.send_json({"jsonrpc": "2.0", "method": "chain_newHead", "params": []})
                if body["method"] == "garbage":
                    await ws.send_str("not json")
                    continue
                await ws.send_json(_answer(body))
        return ws

    app = web.Application()
    app.router.add_post("/", http_handler)
    app.router.add_post("/html", html_handler)
    app.router.add_get("/ws", ws_handler)
    server = TestServer(app)
    await server.start_server()
    yield f"{server.host}:{server.port}"
    await server.close()


@pytest.mark.asyncio
async def test_http_provider_call(rpc_server):
    provider = HttpProvider("local", NetworkConfig(endpoint=f"http://{rpc_server}/"))

    async with provider:
        assert await provider.send("system_chain") == "Development"


@pytest.mark.asyncio
async def test_http_provider_rpc_error(rpc_server):
    provider = HttpProvider("local", NetworkConfig(endpoint=f"http://{rpc_server}/"))

    async with provider:
        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.send("nope")

    assert exc_info.value.method == "nope"
    assert exc_info.value.error["code"] == -32601


@pytest.mark.asyncio
async def test_ws_provider_matches_responses_by_id(rpc_server):
    provider = WsProvider("local", NetworkConfig(endpoint=f"ws://{rpc_server}/ws"))

    async with provider:
        assert await provider.send("system_chain") == "Development"
        assert await provider.send("system_chain") == "Development"


@pytest.mark.asyncio
async def test_unreachable_endpoint():
    provider = HttpProvider(
        "local", NetworkConfig(endpoint="http://127.0.0.1:9/", timeout=2)
    )

    async with provider:
        with pytest.raises(ProviderRequestError):
            await provider.send("system_chain")


def test_requests_are_json_rpc_2():
    provider = HttpProvider("local", NetworkConfig(endpoint="http://localhost"))

    first = provider._build_request("a", None)
    second = provider._build_request("b", [1])

    assert first == {"jsonrpc": "2.0", "id": 1, "method": "a", "params": []}
    assert second["id"] == 2
    assert second["params"] == [1]


@pytest.mark.asyncio
async def test_http_provider_non_json_body(rpc_server):
    provider = HttpProvider("local", NetworkConfig(endpoint=f"http://{rpc_server}/html"))

    async with provider:
        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.send("system_chain")

    assert "invalid JSON response" in str(exc_info.value)


@pytest.mark.asyncio
async def test_ws_provider_non_json_frame(rpc_server):
    provider = WsProvider("local", NetworkConfig(endpoint=f"ws://{rpc_server}/ws"))

    async with provider:
        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.send("garbage")

    assert exc_info.value.method == "garbage"
    assert "invalid JSON response" in str(exc_info.value)
