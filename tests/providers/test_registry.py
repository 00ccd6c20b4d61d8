from unittest.mock import MagicMock, patch

import pytest

from tasklane.config.model import NetworkConfig
from tasklane.providers import HttpProvider, WsProvider, create_provider
from tasklane.providers.registry import ENTRY_POINT_GROUP, ProviderRegistry
from tasklane.runtime.exceptions import UnsupportedEndpointError


@pytest.mark.parametrize(
    "endpoint, provider_class",
    [
        ("http://127.0.0.1:9933", HttpProvider),
        ("HTTPS://rpc.example.org", HttpProvider),
        ("ws://127.0.0.1:9944", WsProvider),
        ("wss://rpc.example.org", WsProvider),
    ],
)
def test_builtin_schemes(endpoint, provider_class):
    provider = create_provider("net", NetworkConfig(endpoint=endpoint))

    assert isinstance(provider, provider_class)
    assert provider.network_name == "net"


@pytest.mark.parametrize("endpoint", ["ipc:///tmp/node.sock", "127.0.0.1:9944"])
def test_unsupported_scheme(endpoint):
    with pytest.raises(UnsupportedEndpointError) as exc_info:
        create_provider("net", NetworkConfig(endpoint=endpoint))

    assert exc_info.value.endpoint == endpoint


def test_entry_points_are_discovered_on_first_lookup():
    factory = MagicMock()
    good = MagicMock()
    good.name = "IPC"
    good.load.return_value = factory
    broken = MagicMock()
    broken.name = "broken"
    broken.load.side_effect = ImportError("missing")

    registry = ProviderRegistry()
    with patch(
        "tasklane.providers.registry.importlib.metadata.entry_points",
        return_value=[good, broken],
    ) as entry_points:
        assert registry.get("ipc") is factory
        assert registry.get("broken") is None

    entry_points.assert_called_once_with(group=ENTRY_POINT_GROUP)
    assert registry.schemes() == ["ipc"]


def test_explicit_registration_is_case_insensitive():
    registry = ProviderRegistry()
    registry._loaded = True
    factory = MagicMock()

    registry.register("Custom", factory)

    assert registry.get("CUSTOM") is factory
