# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Notifier - fire-and-forget notifications emitted by action nodes.
"""

import logging
from typing import Any, Optional

from forgeflow.core.logging import log_event


class LogNotifier:
    """Writes notifications to the structured log"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("forgeflow.notifications")

    async def notify(self, message: str, payload: Any = None) -> None:
        log_event(self.logger, "notification", notification=message, payload=payload)
