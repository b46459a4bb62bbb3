"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import yaml

from loudspin.core.config import CONFIG_PATH, load_config
from loudspin.core.devices import expand_all
from loudspin.core.dispatch import Dispatcher
from loudspin.core.model import Config, ListRequest, MatchError, ResolvedRequest, RunOutcome
from loudspin.privileges.base import Elevator
from loudspin.privileges.capabilities import CapabilityElevator
from loudspin.tools.base import Tool
from loudspin.tools.hdparm import HdparmTool

LOGGER = logging.getLogger(__name__)

MatchErrorHandler = Callable[[MatchError], None]


def _log_match_error(error: MatchError) -> None:
    LOGGER.error("failed to list file: %s", error)


class LoudspinService:
    def __init__(
        self,
        *,
        config_path: Path = CONFIG_PATH,
        elevator: Elevator | None = None,
        tool_factory: Callable[[str], Tool] | None = None,
    ) -> None:
        self.config: Config = load_config(config_path)
        self.elevator = elevator or CapabilityElevator()
        self.tool_factory = tool_factory or HdparmTool
        _log_config(self.config)

    def list_levels(self) -> list[tuple[str, int]]:
        return self.config.levels.list_all()

    def run(
        self,
        request: ResolvedRequest,
        *,
        on_match_error: MatchErrorHandler | None = None,
    ) -> RunOutcome:
        report_match_error = on_match_error or _log_match_error

        # Elevation happens for every mode, list included.
        self.elevator.elevate()
        LOGGER.debug("set capabilities")

        if isinstance(request, ListRequest):
            return RunOutcome(request=request, levels=tuple(self.list_levels()))

        dispatcher = Dispatcher(self.tool_factory(self.config.hdparm_path), request, self.config.levels)
        devices: list[Path] = []
        for item in expand_all(self.config.devices):
            if isinstance(item, MatchError):
                report_match_error(item)
                continue
            LOGGER.debug("found device file at %s", item)
            dispatcher.dispatch(item)
            devices.append(item)

        return RunOutcome(request=request, devices=tuple(devices))


def _log_config(config: Config) -> None:
    if not LOGGER.isEnabledFor(logging.DEBUG):
        return
    LOGGER.debug("read config:")
    for line in yaml.safe_dump(config.to_dict(), sort_keys=False).splitlines():
        LOGGER.debug("\t%s", line)
