"""Named loudness levels and their AAM values."""

from __future__ import annotations

from collections.abc import Mapping

from loudspin.core.errors import InvalidLevelError, LevelNotFoundError

MIN_LEVEL = 128
MAX_LEVEL = 254
DEFAULT_LEVELS: dict[str, int] = {"loud": MAX_LEVEL, "quiet": MIN_LEVEL}


class LevelTable:
    """Mapping of level name to AAM value.

    "loud" and "quiet" are always present. Configured entries may override
    their values but never remove them.
    """

    def __init__(self, levels: Mapping[str, int] | None = None) -> None:
        merged = dict(levels or {})
        for name, value in DEFAULT_LEVELS.items():
            merged.setdefault(name, value)
        self._levels = merged

    def __repr__(self) -> str:
        return f"LevelTable({self.as_dict()!r})"

    def resolve(self, name: str) -> int:
        try:
            return self._levels[name]
        except KeyError:
            raise LevelNotFoundError(f"no such loudness level: {name}") from None

    def validate(self, source: object = "configuration") -> None:
        for name, value in self.list_all():
            if value < MIN_LEVEL or value > MAX_LEVEL:
                raise InvalidLevelError(f"invalid AAM level in {source}: {name} = {value}")

    def list_all(self) -> list[tuple[str, int]]:
        return sorted(self._levels.items())

    def as_dict(self) -> dict[str, int]:
        return dict(self.list_all())
