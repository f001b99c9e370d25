"""API error types and the JSON error body returned to clients."""

from pydantic import BaseModel


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_INVALID_PAYLOAD = "ERR_INVALID_PAYLOAD"
    ERR_ITEM_NOT_FOUND = "ERR_ITEM_NOT_FOUND"
    ERR_ROUTE_NOT_FOUND = "ERR_ROUTE_NOT_FOUND"


class ErrorResponse(BaseModel):
    """Error body sent for every handled failure."""

    error: str


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 400
    code: str = ErrorCode.ERR_INVALID_PAYLOAD

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> ErrorResponse:
        """Build the client-facing error body."""
        return ErrorResponse(error=self.message)


class InvalidPayloadError(ApiError):
    """Request body is missing a required field or has the wrong shape."""

    status_code = 400
    code = ErrorCode.ERR_INVALID_PAYLOAD


class ItemNotFoundError(ApiError):
    """No item with the requested id exists in the instance."""

    status_code = 404
    code = ErrorCode.ERR_ITEM_NOT_FOUND


class RouteNotFoundError(ApiError):
    """No handler matches the resource and method."""

    status_code = 404
    code = ErrorCode.ERR_ROUTE_NOT_FOUND

    def __init__(self, message: str = "API endpoint not found or method not allowed.") -> None:
        super().__init__(message)
