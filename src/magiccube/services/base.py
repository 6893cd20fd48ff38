"""BaseService — shared foundation for magiccube services.

Every service receives the :class:`DefinitionSlot` it reads from and,
optionally, a loaded :class:`PluginManager` for lifecycle events.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from magiccube.plugins.manager import PluginManager
    from magiccube.services.definition import DefinitionSlot

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, slot: DefinitionSlot, plugins: PluginManager | None = None) -> None:
        self._slot = slot
        self._plugins = plugins

    @property
    def slot(self) -> DefinitionSlot:
        return self._slot

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            self._plugins.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
