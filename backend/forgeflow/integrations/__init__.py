# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
External collaborators used by action and inference nodes:
- providers: hosted model inference
- notifier: user notifications
- ledger: execution records on an external ledger
"""
