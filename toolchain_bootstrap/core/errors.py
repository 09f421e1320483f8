"""
Exception hierarchy for the Toolchain Bootstrap Tool
Every error carries the return code the step (or the CLI) exits with.
"""


class BootstrapError(Exception):
    """Base class for all bootstrap failures."""
    def __init__(self, message: str, returncode: int = 1):
        super().__init__(message)
        self.message = message
        self.returncode = returncode


class ConfigError(BootstrapError):
    pass


class InstallerFetchError(BootstrapError):
    """The installer could not be downloaded (network failure or HTTP error)."""


class ChecksumMismatchError(BootstrapError):
    pass


class InstallerExecutionError(BootstrapError):
    """The interpreter running the installer exited non-zero."""


class EnvFileNotFoundError(BootstrapError):
    pass


class EnvSourcingError(BootstrapError):
    """The interpreter failed while sourcing the environment file."""
