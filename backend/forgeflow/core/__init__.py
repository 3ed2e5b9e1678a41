# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for the ForgeFlow backend.

This package contains:
- config: Configuration management
- dependencies: Dependency injection
- errors: Custom exceptions
- logging: Structured logging
"""

from forgeflow.core.config import get_config, Config
from forgeflow.core.errors import ForgeFlowError, NotFoundError, ValidationError
from forgeflow.core.logging import get_logger

__all__ = [
    "get_config",
    "Config",
    "ForgeFlowError",
    "NotFoundError",
    "ValidationError",
    "get_logger",
]
