from __future__ import annotations

import shutil
from typing import Dict

from infrastructure.utils.log_format import format_kv


class DiskSpaceIndicator:
    """Free-space check for the volume holding `path`.

    UP while free bytes stay at or above `threshold_bytes`. `shutil.disk_usage`
    raises OSError for a missing path; the health endpoint reports that as DOWN.
    """

    backend_name = "disk"

    def __init__(self, *, path: str, threshold_bytes: int) -> None:
        self._path = path
        self._threshold_bytes = max(0, int(threshold_bytes))

    def usage(self) -> Dict[str, int]:
        total, used, free = shutil.disk_usage(self._path)
        return {"total": int(total), "used": int(used), "free": int(free)}

    async def ping(self) -> bool:
        return self.usage()["free"] >= self._threshold_bytes

    def describe(self) -> str:
        usage = self.usage()
        return format_kv(path=self._path, free=usage["free"], total=usage["total"], threshold=self._threshold_bytes)
