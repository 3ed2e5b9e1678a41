# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Key/Value Store - one JSON file per key.

Backs saved action data and workflow definitions. Everything stays
inspectable with `cat` and `jq`.

Thread-safe with async file locking to prevent race conditions
"""

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import aiofiles.os

from forgeflow.core.errors import ValidationError

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\-]{0,199}$")


class KeyValueStore:
    """
    Storage structure:
        {base_dir}/
        ├── {key}.json
        └── {key}.json
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

        # Async locks for thread-safe file operations
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, key: str) -> asyncio.Lock:
        """Get or create lock for a specific key"""
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def _path(self, key: str) -> Path:
        if not isinstance(key, str) or not KEY_PATTERN.match(key):
            raise ValidationError(f"Invalid storage key: {key!r}", field="key")
        return self.base_dir / f"{key}.json"

    async def put(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value"""
        path = self._path(key)
        async with self._get_lock(key):
            async with aiofiles.open(path, "w") as f:
                await f.write(json.dumps(value, indent=2, default=str))

    async def get(self, key: str) -> Optional[Any]:
        """Value stored under key, or None"""
        path = self._path(key)
        async with self._get_lock(key):
            if not path.exists():
                return None
            async with aiofiles.open(path, "r") as f:
                return json.loads(await f.read())

    async def exists(self, key: str) -> bool:
        return self._path(key).exists()

    async def delete(self, key: str) -> bool:
        """Remove key. Returns False if it was not stored."""
        path = self._path(key)
        async with self._get_lock(key):
            if not path.exists():
                return False
            await aiofiles.os.remove(path)
            return True

    def keys(self) -> List[str]:
        """Stored keys; files whose names are not valid keys are ignored"""
        return sorted(
            path.stem for path in self.base_dir.glob("*.json")
            if KEY_PATTERN.match(path.stem)
        )

    async def list(self) -> List[Dict[str, Any]]:
        """All entries as [{"key": ..., "value": ...}], sorted by key"""
        entries = []
        for key in self.keys():
            try:
                value = await self.get(key)
            except json.JSONDecodeError as e:
                logger.warning(f"Skipping unreadable entry {key}: {e}")
                continue
            if value is not None:
                entries.append({"key": key, "value": value})
        return entries
