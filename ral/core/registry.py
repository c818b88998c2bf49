"""Registry of loaded providers.

The registry is the only place that holds strong references to providers;
resources point back at their provider weakly.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from ral.core.provider import Provider
from ral.core.result import Error
from ral.exceptions import ProviderNotFoundError

if TYPE_CHECKING:
    from ral.config import RalConfig

logger = structlog.get_logger(__name__)


class ProviderRegistry:
    """Registry of providers, keyed by the resource type they manage.

    Usage:
        # Load providers from the configured data dirs
        ProviderRegistry.load(config)

        # Get the provider for a type
        provider = ProviderRegistry.get("user")

        # Get all registered type names
        names = ProviderRegistry.all_names()
    """

    _providers: dict[str, Provider] = {}

    @classmethod
    def register(cls, name: str, provider: Provider) -> None:
        """Register a provider under a resource type name.

        Args:
            name: Resource type name (e.g., "user")
            provider: The provider instance
        """
        cls._providers[name] = provider

    @classmethod
    def get(cls, name: str) -> Provider:
        """Get the provider for a resource type.

        Raises:
            ProviderNotFoundError: If no provider is registered for the name
        """
        if name not in cls._providers:
            available = ", ".join(sorted(cls._providers)) if cls._providers else "none"
            raise ProviderNotFoundError(
                f"No provider registered for '{name}'. Available: {available}"
            )
        return cls._providers[name]

    @classmethod
    def all_names(cls) -> list[str]:
        return sorted(cls._providers)

    @classmethod
    def all(cls) -> list[Provider]:
        return [cls._providers[name] for name in cls.all_names()]

    @classmethod
    def clear(cls) -> None:
        """Drop all registered providers.

        Primarily useful for testing.
        """
        cls._providers.clear()

    @classmethod
    def load(
        cls,
        config: "RalConfig",
        *,
        executor: Callable | None = None,
    ) -> list[Error]:
        """Load the provider scripts found in the configured data dirs.

        Each script is described, prepared and asked whether it is suitable.
        Suitable providers are registered under their resource type; when
        two providers manage the same type the first one found wins.

        Args:
            config: Configuration with data dirs, timeout and disabled list
            executor: Function used to run scripts (for tests)

        Returns:
            Errors for scripts that could not be loaded
        """
        # Import here to avoid circular imports
        from ral.execution import execute
        from ral.providers.loader import discover_scripts, load_script_provider

        errors: list[Error] = []
        for path in discover_scripts(config.data_dirs):
            res = load_script_provider(path, timeout=config.timeout,
                                       executor=executor or execute)
            if not res:
                logger.warning("provider_load_failed", path=str(path), detail=res.err().detail)
                errors.append(res.err())
                continue
            provider = res.unwrap()

            prepared = provider.prepare()
            if not prepared:
                logger.warning("provider_load_failed", path=str(path),
                               detail=prepared.err().detail)
                errors.append(prepared.err())
                continue

            if provider.qualified_name in config.disabled:
                logger.info("provider_disabled", provider=provider.qualified_name)
                continue

            suitable = provider.suitable()
            if not suitable:
                logger.warning("provider_load_failed", path=str(path),
                               detail=suitable.err().detail)
                errors.append(suitable.err())
                continue
            if not suitable.unwrap():
                logger.debug("provider_not_suitable", provider=provider.qualified_name)
                continue

            type_name = provider.spec.type_name
            if type_name in cls._providers:
                logger.info("provider_shadowed", provider=provider.qualified_name,
                            used=cls._providers[type_name].qualified_name)
                continue
            cls.register(type_name, provider)
            logger.debug("provider_registered", provider=provider.qualified_name,
                         source=provider.source)
        return errors
