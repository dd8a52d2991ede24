from __future__ import annotations


class ApiError(Exception):
    """Application error rendered as `{"error": code}` with the given status."""

    def __init__(self, status_code: int, code: str):
        super().__init__(code)
        self.status_code = int(status_code)
        self.code = code


class ValidationFailed(ApiError):
    def __init__(self, code: str):
        super().__init__(400, code)


class StorageUnavailable(ApiError):
    """The storage backend was never configured (demo mode). Fail closed."""

    def __init__(self) -> None:
        super().__init__(500, "storage_not_configured")
