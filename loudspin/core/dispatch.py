"""Translation of a resolved request into hdparm invocations."""

from __future__ import annotations

import logging
from pathlib import Path

from loudspin.core.levels import LevelTable
from loudspin.core.model import ListRequest, ResolvedRequest, SetLevelRequest
from loudspin.tools.base import Tool

AAM_FLAG = "-M"
LOGGER = logging.getLogger(__name__)


class Dispatcher:
    """Runs hdparm once per device for a show or set-level request.

    The level name is translated when the dispatcher is built, so an unknown
    level fails before the first device is touched.
    """

    def __init__(self, tool: Tool, request: ResolvedRequest, levels: LevelTable) -> None:
        if isinstance(request, ListRequest):
            raise ValueError("list requests do not invoke hdparm")
        self.tool = tool
        self.request = request
        self.level_value: int | None = None
        if isinstance(request, SetLevelRequest):
            self.level_value = levels.resolve(request.name)

    def arguments(self, device: Path) -> list[str]:
        if self.level_value is None:
            return [AAM_FLAG, str(device)]
        return [AAM_FLAG, str(self.level_value), str(device)]

    def dispatch(self, device: Path) -> int:
        # Spawn and wait failures propagate and abort the run.
        status = self.tool.run(self.arguments(device))
        if status != 0:
            LOGGER.warning("hdparm exited with status %d for %s", status, device)
        LOGGER.debug("executed hdparm for %s", device)
        return status
