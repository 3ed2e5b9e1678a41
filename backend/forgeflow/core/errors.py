# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Service-level exceptions for the ForgeFlow backend.

Routers map these onto HTTP responses; engine failures that belong to a single
node live in forgeflow.engine.exceptions instead.
"""

import re
from typing import Optional

MAX_USER_ERROR_LENGTH = 500

# Absolute paths under the deployment root are stripped before errors reach clients
_INTERNAL_PATH = re.compile(r"/(?:app|configs|data)/")


class ForgeFlowError(Exception):
    """Base exception for ForgeFlow service errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Error body for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details
        }


class NotFoundError(ForgeFlowError):
    """A stored workflow or execution does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: str, details: Optional[dict] = None):
        super().__init__(f"{resource} not found: {identifier}", details=details)
        self.resource = resource
        self.identifier = identifier


class ValidationError(ForgeFlowError):
    """
    Rejected input.

    Workflow validation failures carry the validator's messages in
    details["errors"].
    """

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.field = field


class ConflictError(ForgeFlowError):
    """Workflow id already taken."""

    status_code = 409

    def __init__(self, message: str, resource: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.resource = resource


def sanitize_error_for_user(error: Exception, include_type: bool = True) -> str:
    """
    Single-line, path-free message suitable for an API response.

    Args:
        error: The exception to describe
        include_type: Prefix the exception class name

    Returns:
        Message truncated to MAX_USER_ERROR_LENGTH characters
    """
    error_msg = _INTERNAL_PATH.sub("", str(error).strip())

    if len(error_msg) > MAX_USER_ERROR_LENGTH:
        error_msg = error_msg[:MAX_USER_ERROR_LENGTH] + "..."

    if include_type:
        return f"{error.__class__.__name__}: {error_msg}"
    return error_msg
