import importlib.metadata
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# (network_name, network_config) -> provider
ProviderFactory = Callable[[str, Any], Any]

ENTRY_POINT_GROUP = "tasklane.providers"


class ProviderRegistry:
    """
    Maps endpoint schemes ("http", "ws", ...) to provider factories.

    Built-in schemes are registered on import; extra schemes are discovered
    from the `tasklane.providers` entry-point group the first time a scheme
    is looked up. An entry point's name is the scheme it handles.
    """

    _instance = None

    def __init__(self):
        self._factories: Dict[str, ProviderFactory] = {}
        self._loaded = False

    @classmethod
    def instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get(self, scheme: str) -> Optional[ProviderFactory]:
        if not self._loaded:
            self._discover_entry_points()
            self._loaded = True

        return self._factories.get(scheme.lower())

    def register(self, scheme: str, factory: ProviderFactory):
        self._factories[scheme.lower()] = factory

    def schemes(self) -> List[str]:
        return sorted(self._factories)

    def _discover_entry_points(self):
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            try:
                factory = ep.load()
            except Exception as e:
                logger.warning("Error loading provider plugin %s: %s", ep.name, e)
                continue

            if not callable(factory):
                logger.warning(
                    "Provider plugin %s is not callable. Skipping.", ep.name
                )
                continue

            logger.debug("Registering provider plugin %s", ep.name)
            self._factories[ep.name.lower()] = factory


registry = ProviderRegistry.instance()
