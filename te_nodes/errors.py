from typing import Optional


class TEError(Exception):
    # Base class for everything this tool raises on purpose.
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ConfigError(TEError):
    pass


class AuthenticationError(TEError):
    pass


class QueryError(TEError):
    pass


class UpdateError(TEError):
    pass
