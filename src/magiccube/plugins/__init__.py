"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) plus ``.magiccube/plugins/*.py``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from magiccube.plugins.manager import PluginManager, hookimpl

__all__ = ["PluginManager", "hookimpl"]
