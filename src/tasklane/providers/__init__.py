from urllib.parse import urlparse

from tasklane.config.model import NetworkConfig
from tasklane.runtime.exceptions import UnsupportedEndpointError

from .jsonrpc import HttpProvider, JsonRpcProvider, WsProvider
from .registry import ProviderRegistry, registry

registry.register("http", HttpProvider)
registry.register("https", HttpProvider)
registry.register("ws", WsProvider)
registry.register("wss", WsProvider)


def create_provider(network_name: str, network_config: NetworkConfig):
    """Builds the provider for a network from the scheme of its endpoint."""
    scheme = urlparse(network_config.endpoint).scheme
    factory = registry.get(scheme) if scheme else None
    if factory is None:
        raise UnsupportedEndpointError(network_name, network_config.endpoint)
    return factory(network_name, network_config)


__all__ = [
    "create_provider",
    "HttpProvider",
    "JsonRpcProvider",
    "WsProvider",
    "ProviderRegistry",
    "registry",
]
