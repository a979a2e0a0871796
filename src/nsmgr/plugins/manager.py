"""Plugin discovery, registration, and hook dispatch.

Third-party plugins are discovered through the ``nsmgr.plugins`` entry
point group. Built-in plugins are registered by the workspace.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from nsmgr.plugins.hookspecs import PROJECT_NAME, NsmgrHookSpec

ENTRY_POINT_GROUP = "nsmgr.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(NsmgrHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins; returns the names of all registered plugins."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_classes()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def call(self, hook_name: str, warnings: list[str], **kwargs: Any) -> None:
        """Call *hook_name* on every plugin.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            getattr(self.hook, hook_name)(**kwargs)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    def _instantiate_classes(self) -> None:
        """Entry points may register a class; swap it for an instance."""
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate plugin %s", plugin_name, exc_info=True)
                continue
            self._pm.register(instance, name=plugin_name)
