"""hdparm invocation using subprocess."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from loudspin.core.errors import InvocationError


class HdparmTool:
    def __init__(self, path: str) -> None:
        self.path = path

    def run(self, args: Sequence[str]) -> int:
        try:
            process = subprocess.Popen([self.path, *args])
        except OSError as exc:
            raise InvocationError("error calling hdparm") from exc

        try:
            return process.wait()
        except OSError as exc:
            raise InvocationError("error waiting for hdparm to complete") from exc
