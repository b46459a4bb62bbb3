"""Privilege elevation interfaces."""

from __future__ import annotations

from typing import Protocol


class Elevator(Protocol):
    def elevate(self) -> None:
        """Acquire the privileges hdparm needs, raising PrivilegeError on failure."""
