# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution Store - workflow run history as JSON files, one per execution,
grouped by the date encoded in the execution id
"""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

logger = logging.getLogger(__name__)


class ExecutionStore:
    """
    Store and query workflow execution records.

    Storage structure:
        executions/
        └── {YYYY-MM-DD}/
            ├── exec_20250101_120000_ab12cd34.json
            └── exec_20250101_120502_ef56ab78.json

    Each file holds one serialized ExecutionRecord (camelCase keys).
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, file_path: str) -> asyncio.Lock:
        """Get or create lock for a specific file"""
        if file_path not in self._locks:
            self._locks[file_path] = asyncio.Lock()
        return self._locks[file_path]

    @staticmethod
    def _date_dir_name(execution_id: str) -> Optional[str]:
        """exec_YYYYMMDD_HHMMSS_hash -> YYYY-MM-DD"""
        try:
            date_str = execution_id.split("_")[1]
            return datetime.strptime(date_str, "%Y%m%d").strftime("%Y-%m-%d")
        except (IndexError, ValueError):
            return None

    async def save(self, execution: Dict[str, Any]) -> str:
        """
        Save execution to disk.

        Args:
            execution: Serialized execution record

        Returns:
            Path to saved file
        """
        execution_id = execution["executionId"]
        date_dir = self.base_dir / (self._date_dir_name(execution_id) or "undated")
        date_dir.mkdir(parents=True, exist_ok=True)

        execution_file = date_dir / f"{execution_id}.json"

        async with self._get_lock(str(execution_file)):
            async with aiofiles.open(execution_file, "w") as f:
                await f.write(json.dumps(execution, indent=2, default=str))

        return str(execution_file)

    def get(self, execution_id: str) -> Optional[Dict[str, Any]]:
        """
        Get execution by ID.

        Returns:
            Execution data or None if not found
        """
        if "/" in execution_id or ".." in execution_id:
            return None

        date = self._date_dir_name(execution_id)
        if date is None:
            return self._search_all_dates(execution_id)

        return self._read(self.base_dir / date / f"{execution_id}.json")

    def _search_all_dates(self, execution_id: str) -> Optional[Dict[str, Any]]:
        """Ids without a parseable date may sit in any day directory"""
        for execution_file in self.base_dir.glob(f"*/{execution_id}.json"):
            return self._read(execution_file)
        return None

    @staticmethod
    def _read(execution_file: Path) -> Optional[Dict[str, Any]]:
        if not execution_file.is_file():
            return None
        with open(execution_file, "r") as f:
            return json.load(f)

    def list(
        self,
        date: Optional[str] = None,
        workflow_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        """
        List executions with optional filters.

        Args:
            date: Filter by date (YYYY-MM-DD)
            workflow_id: Filter by workflow id
            status: Filter by status (completed/failed)
            limit: Max results to return
            offset: Skip first N results

        Returns:
            List of execution records (newest first)
        """
        executions = []

        if date:
            date_dirs = [self.base_dir / date]
        else:
            date_dirs = sorted(self.base_dir.glob("*"), reverse=True)

        for date_dir in date_dirs:
            if not date_dir.is_dir():
                continue

            for execution_file in sorted(date_dir.glob("exec_*.json"), reverse=True):
                try:
                    with open(execution_file, "r") as f:
                        execution_data = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    logger.warning(f"Failed to load execution {execution_file}: {e}")
                    continue

                if workflow_id and execution_data.get("workflowId") != workflow_id:
                    continue
                if status and execution_data.get("status") != status:
                    continue

                executions.append(execution_data)

                if len(executions) >= limit + offset:
                    break

            if len(executions) >= limit + offset:
                break

        return executions[offset:offset + limit]

    def get_statistics(self, workflow_id: Optional[str] = None) -> Dict[str, Any]:
        """Counts and success rate over stored executions"""
        executions = self.list(workflow_id=workflow_id, limit=100000)
        total = len(executions)
        completed = sum(1 for e in executions if e.get("status") == "completed")

        return {
            "total_executions": total,
            "completed": completed,
            "failed": total - completed,
            "success_rate": round(completed / total * 100, 2) if total > 0 else 0,
        }
