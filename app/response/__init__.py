from .response import (
    APIError,
    ErrorPayload,
    Meta,
    Pagination,
    StandardResponse,
    make_error_response,
    make_success_response,
    not_found,
)

__all__ = [
    "APIError",
    "Pagination",
    "Meta",
    "ErrorPayload",
    "StandardResponse",
    "make_success_response",
    "make_error_response",
    "not_found",
]
