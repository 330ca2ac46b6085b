from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError


_DATETIME = TypeAdapter(datetime)


class SelectionPolicy(str, Enum):
    STRICT = "strict"    # ServerFiles-<version>.zip or isServerPack=true
    POINTER = "pointer"  # follows serverPackFileId, loose version fallback


class FileRecord(BaseModel):
    """One file entry of a CurseForge project, as returned by the API."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    fileName: Optional[str] = None
    fileDate: Optional[str] = None
    isServerPack: Optional[bool] = None
    serverPackFileId: Optional[int] = None

    def timestamp(self) -> float:
        """
        Upload time as POSIX seconds.

        Missing or unparseable dates count as the epoch so such files sort last.
        Naive timestamps and date-only values are read as UTC.
        """
        raw = (self.fileDate or "").strip()
        if not raw:
            return 0.0
        try:
            dt = _DATETIME.validate_python(raw)
        except ValidationError:
            return 0.0
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.timestamp()


class Candidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    fileName: str
    serverVersion: str
