from typing import List


class ChatError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ChatError):
    status_code = 422

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class Conflict(ChatError):
    status_code = 409


class NotFound(ChatError):
    status_code = 404


class Unauthorized(ChatError):
    status_code = 401


class InternalError(ChatError):
    status_code = 500
