"""
Minimal CurseForge API client
-----------------------------
Only the two read calls needed to find a project's newest server pack:
listing one page of project files and fetching a single file by id.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .errors import UpstreamError
from .logging_setup import get_logger
from .models import FileRecord
from .settings import Settings

log = get_logger("serverpack.updater.curseforge")


class CurseForgeClient:
    def __init__(self, api_key: str, base_url: str = "https://api.curseforge.com/v1", timeout: Optional[float] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "CurseForgeClient":
        # raises ConfigurationError before any request is made
        return cls(settings.require_api_key(), settings.curseforge_api_base, settings.http_timeout)

    def _get(self, path: str, query: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        if query:
            url = f"{url}?{urllib.parse.urlencode(query)}"

        req = urllib.request.Request(url, headers={
            "x-api-key": self.api_key,
            "Accept": "application/json",
        })
        log.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                raw = response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            body = _error_body(e)
            raise UpstreamError(f"CurseForge API error {e.code}: {body}", status=e.code, body=body) from e
        except urllib.error.URLError as e:
            raise UpstreamError(f"CurseForge API unreachable ({url}): {e.reason}") from e

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise UpstreamError(f"CurseForge API returned invalid JSON: {e}", body=raw) from e
        if not isinstance(payload, dict):
            raise UpstreamError("CurseForge API response root must be an object", body=raw)
        return payload

    def list_files(self, project_id: int, page_size: int = 50) -> List[FileRecord]:
        """Newest files of a project, one page only."""
        payload = self._get(
            f"/mods/{project_id}/files",
            {"pageSize": page_size, "sortField": "FileDate", "sortOrder": "desc"},
        )
        data = payload.get("data") or []
        if not isinstance(data, list):
            raise UpstreamError("CurseForge file listing: 'data' is not a list")
        try:
            files = [FileRecord.model_validate(item) for item in data]
        except ValidationError as e:
            raise UpstreamError(f"CurseForge file listing contains a malformed record: {e}") from e
        log.info("Fetched %d files for project %s", len(files), project_id)
        return files

    def get_file(self, project_id: int, file_id: int) -> FileRecord:
        payload = self._get(f"/mods/{project_id}/files/{file_id}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise UpstreamError(f"CurseForge file {file_id}: response has no 'data' object")
        try:
            return FileRecord.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(f"CurseForge file {file_id} is malformed: {e}") from e


def _error_body(err: urllib.error.HTTPError) -> str:
    try:
        return err.read().decode("utf-8", errors="replace")
    except (AttributeError, OSError):
        # HTTPError without a readable response attached
        return ""
