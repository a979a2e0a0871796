"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) under ``nsmgr.plugins``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from nsmgr.plugins.hookspecs import hookimpl
from nsmgr.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
