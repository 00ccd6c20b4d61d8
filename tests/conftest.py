from types import SimpleNamespace

import pytest

from tasklane.common.messaging import bus as messaging_bus
from tasklane.config.loader import resolve_config
from tasklane.config.model import CliArguments
from tasklane.runtime.bus import MessageBus
from tasklane.runtime.context import Context
from tasklane.runtime.environment import Environment
from tasklane.runtime.publication import shared
from tasklane.spec.dsl import TasksDSL
from tasklane.testing import SpySubscriber


class FakeProvider:
    def __init__(self, network_name, network_config):
        self.network_name = network_name
        self.endpoint = network_config.endpoint
        self.closed = False

    async def close(self):
        self.closed = True


@pytest.fixture
def bus_and_spy():
    """Provides a MessageBus instance and an attached SpySubscriber."""
    bus = MessageBus()
    spy = SpySubscriber(bus)
    return bus, spy


@pytest.fixture
def dsl():
    return TasksDSL()


@pytest.fixture
def resolved_config():
    return resolve_config(
        {
            "default_network": "localhost",
            "networks": {
                "localhost": {"endpoint": "http://127.0.0.1:9933"},
            }
        }
    )


@pytest.fixture
def namespace():
    """A private publication target, so tests never touch `tasklane.shared`."""
    return SimpleNamespace()


@pytest.fixture
def make_env(dsl, resolved_config, bus_and_spy, namespace):
    """Builds an Environment over `dsl` with a fake provider."""
    bus, _ = bus_and_spy

    def _make(extenders=(), cli_arguments=None, config=None):
        return Environment(
            config or resolved_config,
            cli_arguments or CliArguments(),
            dsl.get_task_definitions(),
            extenders,
            provider_factory=FakeProvider,
            bus=bus,
            namespace=namespace,
        )

    return _make


@pytest.fixture(autouse=True)
def clean_context():
    yield
    Context.delete()
    messaging_bus.set_renderer(None)
    for key in list(vars(shared)):
        delattr(shared, key)
