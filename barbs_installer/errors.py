from __future__ import annotations

from typing import Optional, Sequence


class ProvisionError(RuntimeError):
    """Base class for failures the installer reports to the operator."""


class OperatorCancelled(ProvisionError):
    """The operator declined or exited a blocking prompt."""


class ManifestUnavailable(ProvisionError):
    """Neither a local nor a remote program manifest could be obtained."""


class PrerequisiteInstallFailed(ProvisionError):
    """A foundational tool could not be installed; later steps depend on it."""


class RecordInstallFailed(ProvisionError):
    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(f"Failed to install {identifier}: {reason}")
        self.identifier = identifier
        self.reason = reason


class SubprocessFailed(ProvisionError):
    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stderr: str = "",
        *,
        message: Optional[str] = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message or f"Command failed ({returncode}): {' '.join(self.argv)}")


class StateIncomplete(ProvisionError):
    """A step needs state an earlier step records, e.g. after --start-at skipped it."""
