from __future__ import annotations

NETWORK_ERROR_MSG = "Network error. Please check your connection and try again."

class HuntError(Exception):
    """Base for every error the client raises on purpose."""

class TransportError(HuntError):
    def __init__(self, message: str = NETWORK_ERROR_MSG):
        super().__init__(message)
        self.message = message

class ValidationFailed(HuntError):
    def __init__(self, field_errors: dict[str, str]):
        super().__init__("; ".join(field_errors.values()))
        self.field_errors = field_errors

class ApiError(HuntError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

class Unauthorized(ApiError):
    pass

class RejectedSubmission(ApiError):
    """A code or answer the server refused. The message never repeats the submitted value."""

    @classmethod
    def from_api_error(cls, err: ApiError, submitted: str, fallback: str) -> RejectedSubmission:
        msg = err.message or fallback
        value = submitted.strip()
        if value and value.lower() in msg.lower():
            msg = fallback
        if msg.startswith("HTTP error!"):
            msg = fallback
        return cls(err.status_code, msg)

class StaleResponse(HuntError):
    def __init__(self, resource: str):
        super().__init__(f"stale response for {resource}")
        self.resource = resource
