# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Error Hierarchy — failures that leave the service as a uniform envelope.

Every error renders as ``{"error": <reason phrase>, "message": ...}`` with
one of five status codes. Not-found and forbidden are both reported as 404
so inaccessible resources are indistinguishable from missing ones.
"""

from __future__ import annotations


class APIError(Exception):
    """Base API error with structured response."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict:
        return {"error": self.error, "message": self.message}


class BadRequestError(APIError):
    status_code = 400
    error = "Bad Request"


class UnauthorizedError(APIError):
    status_code = 401
    error = "Unauthorized"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFoundError(APIError):
    status_code = 404
    error = "Not Found"


class ConflictError(APIError):
    status_code = 409
    error = "Conflict"


class UpstreamError(APIError):
    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
