from typing import Optional


class ClientError(Exception):
    pass


class NotAuthenticatedError(ClientError):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ApiError(ClientError):
    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code

    @property
    def retryable(self) -> bool:
        return self.status_code >= 500
