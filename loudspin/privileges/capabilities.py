"""Linux capability elevation for raw block-device access.

hdparm needs CAP_SYS_RAWIO to issue ATA commands and CAP_DAC_OVERRIDE to open
device nodes it does not own. Both are added to the effective, inheritable,
and permitted sets of this process and then raised in the ambient set so the
spawned hdparm inherits them without being capability-aware itself.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

from loudspin.core.errors import PrivilegeError

LOGGER = logging.getLogger(__name__)

_LINUX_CAPABILITY_VERSION_3 = 0x20080522
_LINUX_CAPABILITY_U32S_3 = 2
_PR_CAP_AMBIENT = 47
_PR_CAP_AMBIENT_RAISE = 2
_CAP_LAST_SUPPORTED = 63


class Capability(IntEnum):
    DAC_OVERRIDE = 1
    SYS_RAWIO = 17


REQUIRED_CAPABILITIES: tuple[Capability, ...] = (
    Capability.DAC_OVERRIDE,
    Capability.SYS_RAWIO,
)


@dataclass(frozen=True)
class CapabilitySets:
    effective: int = 0
    permitted: int = 0
    inheritable: int = 0

    def with_capabilities(self, capabilities: Iterable[int]) -> CapabilitySets:
        mask = 0
        for cap in capabilities:
            if cap < 0 or cap > _CAP_LAST_SUPPORTED:
                raise ValueError(f"capability {cap} out of range")
            mask |= 1 << cap
        return CapabilitySets(
            effective=self.effective | mask,
            permitted=self.permitted | mask,
            inheritable=self.inheritable | mask,
        )


class CapabilitySyscalls(Protocol):
    def get(self) -> CapabilitySets:
        """Return the capability sets of the running process."""

    def set(self, sets: CapabilitySets) -> None:
        """Apply capability sets to the running process."""

    def raise_ambient(self, capability: int) -> None:
        """Raise one capability in the ambient set."""


class _CapHeader(ctypes.Structure):
    _fields_ = [("version", ctypes.c_uint32), ("pid", ctypes.c_int)]


class _CapData(ctypes.Structure):
    _fields_ = [
        ("effective", ctypes.c_uint32),
        ("permitted", ctypes.c_uint32),
        ("inheritable", ctypes.c_uint32),
    ]


_CapDataArray = _CapData * _LINUX_CAPABILITY_U32S_3


def _last_os_error() -> OSError:
    errno = ctypes.get_errno()
    return OSError(errno, os.strerror(errno))


class LinuxCapabilitySyscalls:
    """capget/capset/prctl bound from glibc via ctypes."""

    def __init__(self, libc: ctypes.CDLL | None = None) -> None:
        self._libc = libc

    @property
    def libc(self) -> ctypes.CDLL:
        if self._libc is None:
            self._libc = ctypes.CDLL(ctypes.util.find_library("c") or "libc.so.6", use_errno=True)
        return self._libc

    def get(self) -> CapabilitySets:
        header = _CapHeader(_LINUX_CAPABILITY_VERSION_3, 0)
        data = _CapDataArray()
        if self.libc.capget(ctypes.byref(header), data) != 0:
            raise _last_os_error()
        return CapabilitySets(
            effective=data[0].effective | (data[1].effective << 32),
            permitted=data[0].permitted | (data[1].permitted << 32),
            inheritable=data[0].inheritable | (data[1].inheritable << 32),
        )

    def set(self, sets: CapabilitySets) -> None:
        header = _CapHeader(_LINUX_CAPABILITY_VERSION_3, 0)
        data = _CapDataArray()
        for index in range(_LINUX_CAPABILITY_U32S_3):
            shift = 32 * index
            data[index].effective = (sets.effective >> shift) & 0xFFFFFFFF
            data[index].permitted = (sets.permitted >> shift) & 0xFFFFFFFF
            data[index].inheritable = (sets.inheritable >> shift) & 0xFFFFFFFF
        if self.libc.capset(ctypes.byref(header), data) != 0:
            raise _last_os_error()

    def raise_ambient(self, capability: int) -> None:
        ret = self.libc.prctl(
            ctypes.c_int(_PR_CAP_AMBIENT),
            ctypes.c_ulong(_PR_CAP_AMBIENT_RAISE),
            ctypes.c_ulong(capability),
            ctypes.c_ulong(0),
            ctypes.c_ulong(0),
        )
        if ret == -1:
            raise _last_os_error()


class CapabilityElevator:
    def __init__(
        self,
        capabilities: Sequence[int] = REQUIRED_CAPABILITIES,
        *,
        syscalls: CapabilitySyscalls | None = None,
    ) -> None:
        self.capabilities = tuple(capabilities)
        self.syscalls = syscalls or LinuxCapabilitySyscalls()

    def elevate(self) -> None:
        try:
            current = self.syscalls.get()
        except OSError as exc:
            raise PrivilegeError("error initializing capabilities") from exc

        try:
            wanted = current.with_capabilities(self.capabilities)
        except ValueError as exc:
            raise PrivilegeError("error updating capability sets") from exc

        try:
            self.syscalls.set(wanted)
        except OSError as exc:
            raise PrivilegeError("error setting capabilities") from exc

        for cap in self.capabilities:
            try:
                self.syscalls.raise_ambient(cap)
            except OSError as exc:
                raise PrivilegeError("error setting ambient capabilities") from PrivilegeError(
                    f"unable to set ambient capabilities: {exc}"
                )
            LOGGER.debug("raised ambient capability %s", _capability_name(cap))


def _capability_name(cap: int) -> str:
    try:
        return f"CAP_{Capability(cap).name}"
    except ValueError:
        return str(cap)
