"""Stable public API for building tooling on top of loudspin.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from loudspin.core.config import CONFIG_PATH, resolve_request
from loudspin.core.errors import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    InvalidLevelError,
    InvocationError,
    LevelNotFoundError,
    LoudspinError,
    PrivilegeError,
)
from loudspin.core.levels import LevelTable
from loudspin.core.model import (
    Config,
    ListRequest,
    MatchError,
    ResolvedRequest,
    RunOutcome,
    SetLevelRequest,
    ShowRequest,
)
from loudspin.core.service import LoudspinService
from loudspin.privileges.base import Elevator
from loudspin.tools.base import Tool

__all__ = [
    "LoudspinError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "InvalidLevelError",
    "PrivilegeError",
    "LevelNotFoundError",
    "InvocationError",
    "Config",
    "LevelTable",
    "ShowRequest",
    "ListRequest",
    "SetLevelRequest",
    "ResolvedRequest",
    "MatchError",
    "RunOutcome",
    "Client",
]


class Client:
    """Public client for driving loudspin from other programs.

    A `Client` loads and validates the configuration once and then runs
    show, list, or set-level requests against it. The elevator and hdparm
    tool can be replaced for dry runs and tests.
    """

    def __init__(
        self,
        *,
        config_path: Path = CONFIG_PATH,
        elevator: Elevator | None = None,
        tool_factory: Callable[[str], Tool] | None = None,
    ) -> None:
        self._service = LoudspinService(
            config_path=config_path,
            elevator=elevator,
            tool_factory=tool_factory,
        )

    @property
    def config(self) -> Config:
        return self._service.config

    def list_levels(self) -> list[tuple[str, int]]:
        return self._service.list_levels()

    def show(self) -> RunOutcome:
        return self._service.run(resolve_request(show_requested=True))

    def set_level(self, name: str) -> RunOutcome:
        return self._service.run(resolve_request(name))

    def run(self, request: ResolvedRequest) -> RunOutcome:
        return self._service.run(request)
