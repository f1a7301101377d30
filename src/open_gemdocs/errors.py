"""Shared error types for open-gemdocs."""


class GemdocsError(Exception):
    """Base error for all open-gemdocs failures."""


class ConfigError(GemdocsError):
    """Raised when a configuration file fails parsing or validation."""


class PackageNotFoundError(GemdocsError):
    """The package manager has no record of the requested gem."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        msg = f"Gem '{name}' not found"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ObjectNotFoundError(GemdocsError):
    """A documentation object path does not exist in a gem's registry."""

    def __init__(self, path: str, gem_name: str) -> None:
        self.path = path
        self.gem_name = gem_name
        super().__init__(f"Object '{path}' not found in {gem_name}")


class CommandError(GemdocsError):
    """An external command could not be run or exited unsuccessfully."""

    def __init__(self, command: str, detail: str = "") -> None:
        self.command = command
        self.detail = detail
        super().__init__(f"Command failed: {command}" + (f": {detail}" if detail else ""))


class CommandTimeoutError(CommandError):
    """An external command exceeded its timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(command, f"timed out after {timeout}s")


class GeneratorError(GemdocsError):
    """The documentation generator failed to build or load a registry."""


class DocServerError(GemdocsError):
    """The documentation server could not be started or stopped."""


class VersionResolutionError(GemdocsError):
    """No documentation URL could be resolved for a gem version."""
