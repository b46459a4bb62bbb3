"""Core data models used across config, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loudspin.core.levels import LevelTable

DEFAULT_HDPARM_PATH = "/sbin/hdparm"


@dataclass(frozen=True)
class Config:
    devices: tuple[str, ...]
    levels: LevelTable
    hdparm_path: str = DEFAULT_HDPARM_PATH

    def to_dict(self) -> dict[str, Any]:
        return {
            "hdparm_path": self.hdparm_path,
            "devices": list(self.devices),
            "levels": self.levels.as_dict(),
        }


@dataclass(frozen=True)
class ShowRequest:
    """Query the current AAM level of every matched device."""


@dataclass(frozen=True)
class ListRequest:
    """Print the configured loudness levels without touching devices."""


@dataclass(frozen=True)
class SetLevelRequest:
    """Apply the named loudness level to every matched device."""

    name: str


ResolvedRequest = ShowRequest | ListRequest | SetLevelRequest


@dataclass(frozen=True)
class MatchError:
    path: Path
    error: OSError

    def __str__(self) -> str:
        return f"{self.path}: {self.error}"


@dataclass(frozen=True)
class RunOutcome:
    request: ResolvedRequest
    levels: tuple[tuple[str, int], ...] = ()
    devices: tuple[Path, ...] = ()
