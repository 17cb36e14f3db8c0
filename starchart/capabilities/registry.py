"""
Capability registry and plugin version checks.

Manages provider registration, decides which providers are active for the
installed plugin manifest, and answers capability queries for the classifier.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from ..bodies import CelestialBody
from .base import CapabilityProvider

logger = logging.getLogger(__name__)

REQUIRED_PLUGIN = "CustomBarnKit"
REQUIRED_PLUGIN_VERSION = "1.0.0"

_VERSION_RE = re.compile(r"^[vV]?(\d+)(.(\d+)(.(\d+)(.(\d+))?)?)?")


def parse_version(version: str) -> Tuple[int, int, int, int]:
    """
    Parse a loose version string into a comparable 4-tuple.

    Args:
        version: Version string such as "1.12.227" or "v0.991"

    Returns:
        (major, minor, build, revision), missing parts as 0

    Example:
        >>> parse_version("v1.2")
        (1, 2, 0, 0)
    """
    m = _VERSION_RE.match(version.strip())
    if not m:
        return (0, 0, 0, 0)
    return tuple(int(m.group(i)) if m.group(i) else 0 for i in (1, 3, 5, 7))


class CapabilityRegistry:
    """
    Registry of optional capability providers.

    Args:
        plugins: Installed plugins mapped to version strings. None means the
            manifest is unknown and every provider is treated as available.
    """

    def __init__(self, plugins: Optional[Dict[str, str]] = None):
        self.plugins = plugins
        self._providers: Dict[str, CapabilityProvider] = {}
        self._available: Dict[str, bool] = {}
        self._required_reported = False

    def register(self, provider: CapabilityProvider) -> None:
        """
        Register a new provider.

        Args:
            provider: Provider instance to register
        """
        name = provider.name
        if name in self._providers:
            logger.warning(f"Capability provider '{name}' already registered, replacing...")

        self._providers[name] = provider
        self._available.pop(name, None)

    def get(self, name: str) -> Optional[CapabilityProvider]:
        """Get a provider by name, or None if not found."""
        return self._providers.get(name)

    def list_capabilities(self) -> List[str]:
        """Get list of registered provider names."""
        return list(self._providers.keys())

    def verify_plugin(self, plugin: str, min_version: str, silent: bool = False) -> Optional[str]:
        """
        Verify an installed plugin meets a minimum version.

        Args:
            plugin: Plugin name as it appears in the manifest
            min_version: Minimum acceptable version
            silent: Log a missing or outdated plugin at debug level only

        Returns:
            The installed version if the check passed, otherwise None
        """
        if self.plugins is None:
            return min_version

        level = logging.DEBUG if silent else logging.ERROR
        installed = self.plugins.get(plugin)
        if installed is None:
            logger.log(level, f"Couldn't find plugin '{plugin}'!")
            return None

        if parse_version(installed) >= parse_version(min_version):
            logger.debug(
                f"Version check for '{plugin}' passed. Minimum required is {min_version}, "
                f"version found was {installed}"
            )
            return installed

        logger.log(
            level,
            f"Version check for '{plugin}' failed! Minimum required is {min_version}, "
            f"version found was {installed}",
        )
        return None

    def is_available(self, name: str) -> bool:
        """
        Whether a registered provider's plugin is installed and recent enough.

        The result is computed once per provider and cached.
        """
        if name not in self._available:
            provider = self._providers.get(name)
            if provider is None:
                self._available[name] = False
            else:
                found = self.verify_plugin(provider.plugin, provider.min_version, provider.silent)
                self._available[name] = found is not None
                if found is not None:
                    logger.info(f"Successfully initialized {provider.plugin} provider.")
        return self._available[name]

    def active_providers(self) -> List[CapabilityProvider]:
        """Providers whose plugins passed the version check."""
        return [p for name, p in self._providers.items() if self.is_available(name)]

    def check_required(
        self, plugin: str = REQUIRED_PLUGIN, min_version: str = REQUIRED_PLUGIN_VERSION
    ) -> Optional[str]:
        """
        Check the companion plugin that expansion depends on.

        The first failing call logs a warning; later calls stay quiet.

        Returns:
            A user-facing message if the plugin is missing, otherwise None
        """
        if self.verify_plugin(plugin, min_version, silent=True) is not None:
            return None

        message = (
            f"{plugin} {min_version} or newer is required to function properly. "
            f"Expansion is currently disabled and will re-enable itself when {plugin} is installed."
        )
        if not self._required_reported:
            self._required_reported = True
            logger.warning(message)
        return message

    def is_hidden(self, body: CelestialBody) -> bool:
        return any(p.is_hidden(body) for p in self.active_providers())

    def is_invisible(self, body: CelestialBody) -> bool:
        return any(p.is_invisible(body) for p in self.active_providers())

    def is_rnd_skip(self, body: CelestialBody) -> bool:
        return any(p.is_rnd_skip(body) for p in self.active_providers())

    def is_singularity(self, body: CelestialBody) -> bool:
        return any(p.is_singularity(body) for p in self.active_providers())

    def is_wormhole(self, body: CelestialBody) -> bool:
        return any(p.is_wormhole(body) for p in self.active_providers())


def create_default_registry(plugins: Optional[Dict[str, str]] = None) -> CapabilityRegistry:
    """
    Create a registry with all default providers registered.

    Args:
        plugins: Installed plugin manifest (None to treat every provider as present)

    Returns:
        CapabilityRegistry with the Kopernicus, Singularity and wormhole providers
    """
    from .kopernicus import KopernicusProvider
    from .singularity import SingularityProvider
    from .wormholes import WormholeProvider

    registry = CapabilityRegistry(plugins)

    registry.register(KopernicusProvider())
    registry.register(SingularityProvider())
    registry.register(WormholeProvider())

    return registry
