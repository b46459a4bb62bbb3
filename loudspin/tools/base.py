"""External tool interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class Tool(Protocol):
    def run(self, args: Sequence[str]) -> int:
        """Run the tool with ``args``, wait for it, and return its exit status."""
