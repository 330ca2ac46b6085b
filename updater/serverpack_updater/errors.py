from __future__ import annotations


class UpdaterError(RuntimeError):
    """Base class for every fatal error of an update run."""


class ConfigurationError(UpdaterError):
    pass


class UpstreamError(UpdaterError):
    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class SelectionError(UpdaterError):
    pass


class PatchTargetError(UpdaterError):
    def __init__(self, message: str, pattern: str = ""):
        super().__init__(message)
        self.pattern = pattern
