# common/exceptions.py
# -*- coding: utf-8 -*-
"""
Exception types raised by installer steps, and the state reported by
idempotency checks.

Every failure a step can hit is one of the InstallerError subclasses below.
They all propagate to a single handler in the entry point which logs them and
turns them into the process exit code.
"""

import subprocess
from enum import Enum
from typing import List, Optional, Sequence, Union


class StepState(Enum):
    """Result of checking whether a one-time step has already been done."""

    NOT_DONE = "not_done"
    ALREADY_DONE = "already_done"


class InstallerError(Exception):
    """Base class for all errors that abort an installation run."""

    def __init__(
        self,
        message: str,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class PreconditionError(InstallerError):
    """The host is not one this installer may run on (root, wrong OS)."""


class ConfigurationError(InstallerError):
    """A configuration value is not one of the recognised options."""


class ExternalCommandError(InstallerError):
    """An external command or HTTP request failed."""

    def __init__(
        self,
        message: str,
        command: Optional[Union[Sequence[str], str]] = None,
        returncode: Optional[int] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.command = command
        self.returncode = returncode
        super().__init__(message, original_error=original_error)

    @classmethod
    def from_called_process_error(
        cls, error: subprocess.CalledProcessError
    ) -> "ExternalCommandError":
        cmd: Union[List[str], str] = error.cmd
        cmd_str = (
            subprocess.list2cmdline(cmd) if isinstance(cmd, list) else str(cmd)
        )
        return cls(
            f"Command `{cmd_str}` failed (rc {error.returncode}).",
            command=cmd,
            returncode=error.returncode,
            original_error=error,
        )


class ReleaseMetadataError(ExternalCommandError):
    """The release API answered, but not with the expected JSON shape."""
