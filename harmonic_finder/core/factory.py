"""Factory for creating Harmonic Finder components."""

from typing import Dict, Optional, Type

from ..logger import get_logger
from ..services.cache import JsonFileCacheStore, MemoryCacheStore, NullCacheStore
from ..services.resolution import OpenAIResolutionService
from ..services.resolvers import ChordResolver, ScaleResolver
from .config import ConfigManager
from .events import ResolutionEvents
from .interfaces import ICacheStore, IResolutionService

logger = get_logger(__name__)

# Keys of the "resolution" section the service constructor accepts
SERVICE_CONFIG_KEYS = ("api_key", "model", "api_url", "timeout")


class ComponentFactory:
    """Factory for creating resolution components from stored configuration."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.resolution_service_classes: Dict[str, Type[IResolutionService]] = {
            "openai": OpenAIResolutionService,
        }

        self.cache_store_classes: Dict[str, Type[ICacheStore]] = {
            "file": JsonFileCacheStore,
            "memory": MemoryCacheStore,
            "none": NullCacheStore,
        }

        self.events = ResolutionEvents()

    def create_resolution_service(
        self, implementation: str = "openai", **kwargs
    ) -> Optional[IResolutionService]:
        """Create the resolution service, or None when no API key is configured.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.resolution_service_classes:
            raise ValueError(f"Unknown resolution service implementation: {implementation}")

        config = self.config_manager.get_config("resolution")
        params = {key: config[key] for key in SERVICE_CONFIG_KEYS if key in config}
        params.update(kwargs)

        if not params.get("api_key"):
            logger.info("No API key configured; resolution service disabled")
            return None

        cls = self.resolution_service_classes[implementation]
        instance = cls(**params)

        logger.info(f"Created resolution service: {implementation} ({params.get('model')})")
        return instance

    def create_cache_store(self, implementation: Optional[str] = None) -> ICacheStore:
        """Create the response cache.

        With no implementation given, a JSON file store is used when caching
        is enabled and a null store otherwise.

        Raises:
            ValueError: If the implementation is not registered
        """
        config = self.config_manager.get_config("cache")
        if implementation is None:
            implementation = "file" if config.get("enabled", True) else "none"

        if implementation not in self.cache_store_classes:
            raise ValueError(f"Unknown cache store implementation: {implementation}")

        cls = self.cache_store_classes[implementation]
        if implementation == "file":
            instance = cls(config["directory"])
        else:
            instance = cls()

        logger.info(f"Created cache store: {implementation}")
        return instance

    def _resolver_kwargs(self, kwargs):
        if "service" not in kwargs:
            kwargs["service"] = self.create_resolution_service()
        if "cache" not in kwargs:
            kwargs["cache"] = self.create_cache_store()
        kwargs.setdefault("events", self.events)
        kwargs.setdefault(
            "log_timings", self.config_manager.get_config("logging").get("log_timings", False)
        )
        return kwargs

    def create_chord_resolver(self, **kwargs) -> ChordResolver:
        """Create a chord resolver wired to the configured service and cache."""
        instance = ChordResolver(**self._resolver_kwargs(kwargs))
        logger.info("Created chord resolver")
        return instance

    def create_scale_resolver(self, **kwargs) -> ScaleResolver:
        """Create a scale resolver wired to the configured service and cache."""
        instance = ScaleResolver(**self._resolver_kwargs(kwargs))
        logger.info("Created scale resolver")
        return instance
