"""Error taxonomy for workspace operations.

Every error carries the HTTP status the API renders it with, so the core can
raise them without knowing about FastAPI.
"""

from __future__ import annotations


class WorkspaceError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidPathError(WorkspaceError):
    status_code = 400


class PathEscapeError(InvalidPathError):
    pass


class NotFoundError(WorkspaceError):
    status_code = 404


class NotAFileError(WorkspaceError):
    status_code = 400


class NotAFolderError(WorkspaceError):
    status_code = 400


class MissingFieldError(WorkspaceError):
    status_code = 400

    def __init__(self, field: str, context: str | None = None) -> None:
        message = f"{field} required" if context is None else f"{field} required for {context}"
        super().__init__(message)
        self.field = field


class InvalidRequestError(WorkspaceError):
    status_code = 400


class UpstreamError(WorkspaceError):
    """An AI provider or the package manager failed."""

    status_code = 502

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body[:500] if body else body


class CommandTimeoutError(WorkspaceError):
    status_code = 504
