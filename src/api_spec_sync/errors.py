"""Exceptions raised by api-spec-sync.

The reconciliation core (Differ, Merger) never raises; only the Builder and
the I/O shells around the core do.
"""


class SpecSyncError(Exception):
    """Base class for every error raised by this package."""


class UnsupportedMethodError(SpecSyncError):
    """A route names an HTTP method outside the eight OpenAPI operation verbs."""

    def __init__(self, method: str, path: str = ""):
        self.method = method
        self.path = path
        where = f" for path {path}" if path else ""
        super().__init__(f"unsupported HTTP method: {method}{where}")


class SpecReadError(SpecSyncError):
    """A specification or records file could not be read or parsed."""


class ConfigError(SpecSyncError):
    """The project configuration is missing or invalid."""
