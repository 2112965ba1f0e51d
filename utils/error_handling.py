"""
Error handling utilities for the city bus API.
Provides standardized error responses, HTTP status code handling, and error categorization.
"""

import uuid
from typing import Optional, Dict, Any, List, Union
from datetime import datetime
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class ErrorCode:
    """Standard error codes for the city bus API."""

    # Validation Errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_COORDINATES = "INVALID_COORDINATES"
    INVALID_SEAT = "INVALID_SEAT"
    INVALID_PAYMENT = "INVALID_PAYMENT"
    PARAMETER_OUT_OF_RANGE = "PARAMETER_OUT_OF_RANGE"

    # Resource Not Found Errors (404)
    BUS_NOT_FOUND = "BUS_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NO_RESULTS_FOUND = "NO_RESULTS_FOUND"

    # Conflict Errors (409)
    SEAT_UNAVAILABLE = "SEAT_UNAVAILABLE"
    BOOKING_STATE_CONFLICT = "BOOKING_STATE_CONFLICT"

    # Capacity Errors (429)
    SESSION_LIMIT_EXCEEDED = "SESSION_LIMIT_EXCEEDED"

    # Server Errors (500)
    DATABASE_ERROR = "DATABASE_ERROR"
    SYSTEM_ERROR = "SYSTEM_ERROR"


STATUS_CODES = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_COORDINATES: 400,
    ErrorCode.INVALID_SEAT: 400,
    ErrorCode.INVALID_PAYMENT: 400,
    ErrorCode.PARAMETER_OUT_OF_RANGE: 400,

    ErrorCode.BUS_NOT_FOUND: 404,
    ErrorCode.BOOKING_NOT_FOUND: 404,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.NO_RESULTS_FOUND: 404,

    ErrorCode.SEAT_UNAVAILABLE: 409,
    ErrorCode.BOOKING_STATE_CONFLICT: 409,

    ErrorCode.SESSION_LIMIT_EXCEEDED: 429,

    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.SYSTEM_ERROR: 500,
}


class ErrorDetail:
    """Detailed error information structure."""

    def __init__(
        self,
        field: Optional[str] = None,
        value: Optional[str] = None,
        constraint: Optional[str] = None,
        additional_info: Optional[Dict[str, Any]] = None
    ):
        self.field = field
        self.value = value
        self.constraint = constraint
        self.additional_info = additional_info or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {}
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = str(self.value)
        if self.constraint:
            result["constraint"] = self.constraint
        if self.additional_info:
            result.update(self.additional_info)
        return result


class StandardizedError:
    """Standardized error response structure."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Union[ErrorDetail, Dict[str, Any], List[ErrorDetail]]] = None,
        request_id: Optional[str] = None,
        timestamp: Optional[str] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        self.request_id = request_id or str(uuid.uuid4())
        self.timestamp = timestamp or datetime.now().isoformat()

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.code, 500)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        error_dict = {
            "code": self.code,
            "message": self.message,
            "request_id": self.request_id,
            "timestamp": self.timestamp
        }

        if self.details:
            if isinstance(self.details, ErrorDetail):
                error_dict["details"] = self.details.to_dict()
            elif isinstance(self.details, list):
                error_dict["details"] = [
                    detail.to_dict() if isinstance(detail, ErrorDetail) else detail
                    for detail in self.details
                ]
            else:
                error_dict["details"] = self.details

        return {"error": error_dict}


def create_validation_error(
    message: str,
    field: Optional[str] = None,
    value: Optional[str] = None,
    constraint: Optional[str] = None,
    code: str = ErrorCode.VALIDATION_ERROR,
    request_id: Optional[str] = None
) -> StandardizedError:
    """Create a standardized validation error."""
    details = ErrorDetail(field=field, value=value, constraint=constraint)
    return StandardizedError(code=code, message=message, details=details, request_id=request_id)


def create_not_found_error(
    resource_type: str,
    resource_id: str,
    request_id: Optional[str] = None
) -> StandardizedError:
    """Create a standardized not found error."""
    code_map = {
        "bus": ErrorCode.BUS_NOT_FOUND,
        "booking": ErrorCode.BOOKING_NOT_FOUND,
        "session": ErrorCode.SESSION_NOT_FOUND,
    }

    code = code_map.get(resource_type.lower(), ErrorCode.NO_RESULTS_FOUND)
    message = f"{resource_type.title()} with ID '{resource_id}' not found"

    details = ErrorDetail(
        field=f"{resource_type.lower()}_id",
        value=resource_id,
        constraint=f"must be a valid {resource_type.lower()} identifier"
    )

    return StandardizedError(code=code, message=message, details=details, request_id=request_id)


def create_conflict_error(
    code: str,
    message: str,
    additional_info: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None
) -> StandardizedError:
    """Create a standardized conflict error (seat taken, booking already paid)."""
    return StandardizedError(
        code=code,
        message=message,
        details=ErrorDetail(additional_info=additional_info),
        request_id=request_id
    )


def create_server_error(
    code: str,
    subject: str,
    request_id: Optional[str] = None,
    include_debug_info: bool = False,
    debug_info: Optional[str] = None
) -> StandardizedError:
    """Create a standardized database or system error."""
    kind = "Database" if code == ErrorCode.DATABASE_ERROR else "System"
    preposition = "during" if code == ErrorCode.DATABASE_ERROR else "in"
    details = ErrorDetail(
        additional_info={
            "component": subject,
            "guidance": "Please try again later. If the problem persists, contact support."
        }
    )

    # Only include debug info in development/testing environments
    if include_debug_info and debug_info:
        details.additional_info["debug_info"] = debug_info

    return StandardizedError(
        code=code,
        message=f"{kind} error occurred {preposition} {subject}",
        details=details,
        request_id=request_id
    )


def raise_standardized_error(error: StandardizedError, headers: Optional[Dict[str, str]] = None):
    """Raise an HTTPException with standardized error format."""
    raise HTTPException(status_code=error.status_code, detail=error.to_dict(), headers=headers)


class ErrorHandler:
    """Centralized error handler for the city bus API."""

    def __init__(self, include_debug_info: bool = False):
        self.include_debug_info = include_debug_info

    def handle_validation_error(
        self,
        field: str,
        value: Any,
        constraint: str,
        code: str = ErrorCode.VALIDATION_ERROR,
        request_id: Optional[str] = None
    ):
        """Handle validation errors with standardized response."""
        error = create_validation_error(
            message=f"Invalid value for {field}",
            field=field,
            value=str(value),
            constraint=constraint,
            code=code,
            request_id=request_id
        )
        raise_standardized_error(error)

    def handle_not_found(
        self,
        resource_type: str,
        resource_id: str,
        request_id: Optional[str] = None
    ):
        """Handle not found errors with standardized response."""
        error = create_not_found_error(resource_type, resource_id, request_id)
        raise_standardized_error(error)

    def handle_conflict(
        self,
        code: str,
        message: str,
        additional_info: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None
    ):
        """Handle state conflicts with standardized response."""
        error = create_conflict_error(code, message, additional_info, request_id)
        raise_standardized_error(error)

    def handle_session_limit(self, limit: int, request_id: Optional[str] = None):
        error = StandardizedError(
            code=ErrorCode.SESSION_LIMIT_EXCEEDED,
            message=f"Too many open tracking sessions, limit is {limit}",
            details=ErrorDetail(additional_info={
                "limit": limit,
                "guidance": "Close unused tracking views and try again"
            }),
            request_id=request_id
        )
        raise_standardized_error(error)

    def handle_database_error(
        self,
        operation: str,
        original_error: Exception,
        request_id: Optional[str] = None
    ):
        """Handle database errors with standardized response."""
        logger.error(f"Database error in {operation}: {str(original_error)}", exc_info=True)

        error = create_server_error(
            ErrorCode.DATABASE_ERROR,
            operation,
            request_id=request_id,
            include_debug_info=self.include_debug_info,
            debug_info=str(original_error)
        )
        raise_standardized_error(error)


# Global error handler instance
error_handler = ErrorHandler()


def get_request_id(request: Request) -> str:
    """Extract or generate request ID for error tracking."""
    request_id = request.headers.get("X-Request-ID")
    if not request_id:
        request_id = str(uuid.uuid4())
    return request_id


def _with_request_id(headers: Optional[Dict[str, str]], request_id: str) -> Dict[str, str]:
    return {**headers, "X-Request-ID": request_id} if headers else {"X-Request-ID": request_id}


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions."""
    request_id = get_request_id(request)

    logger.error(f"Unhandled exception for request {request_id}: {str(exc)}", exc_info=True)

    error = create_server_error(
        ErrorCode.SYSTEM_ERROR,
        "global_handler",
        request_id=request_id,
        include_debug_info=False  # Never expose debug info in production
    )

    return JSONResponse(
        status_code=500,
        content=error.to_dict(),
        headers={"X-Request-ID": request_id}
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for HTTPExceptions to ensure consistent error format."""
    request_id = get_request_id(request)

    # Already standardized, just add request ID
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
        content["error"]["request_id"] = request_id
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=_with_request_id(exc.headers, request_id)
        )

    code = ErrorCode.NO_RESULTS_FOUND if exc.status_code == 404 else ErrorCode.SYSTEM_ERROR
    error = StandardizedError(code=code, message=str(exc.detail), request_id=request_id)

    return JSONResponse(
        status_code=exc.status_code,
        content=error.to_dict(),
        headers=_with_request_id(exc.headers, request_id)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request validation errors raised by FastAPI."""
    request_id = get_request_id(request)
    errors = exc.errors()

    if len(errors) == 1:
        error = errors[0]
        field = ".".join(str(loc) for loc in error["loc"])
        standardized = create_validation_error(
            message=error["msg"],
            field=field,
            value=str(error.get("input", "")),
            constraint=error["type"],
            request_id=request_id
        )
    else:
        standardized = StandardizedError(
            code=ErrorCode.VALIDATION_ERROR,
            message=f"Multiple validation errors ({len(errors)} errors)",
            details=[
                ErrorDetail(
                    field=".".join(str(loc) for loc in error["loc"]),
                    value=str(error.get("input", "")),
                    constraint=error["msg"]
                )
                for error in errors
            ],
            request_id=request_id
        )

    return JSONResponse(
        status_code=400,
        content=standardized.to_dict(),
        headers={"X-Request-ID": request_id}
    )
