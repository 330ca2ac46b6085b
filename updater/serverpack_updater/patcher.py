from __future__ import annotations
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple
from .errors import PatchTargetError
from .logging_setup import get_logger
from .models import Candidate

log = get_logger("serverpack.updater.patcher")

# Lines are matched up to, not including, an optional trailing "\r" so CRLF files keep their endings.
_STRICT_PATTERNS = (
    re.compile(r'^SERVER_VERSION="[^\r\n]*"(?=\r?$)', re.MULTILINE),
    re.compile(r"^SERVER_FILE_ID=\d+(?=\r?$)", re.MULTILINE),
)
_LOOSE_PATTERNS = (
    re.compile(r"^SERVER_VERSION=[^\r\n]*", re.MULTILINE),
    re.compile(r"^SERVER_FILE_ID=[^\r\n]*", re.MULTILINE),
)


@dataclass
class PatchResult:
    path: Path
    server_version: str
    file_id: int
    changed: bool
    written: bool


def render(text: str, candidate: Candidate, *, strict: bool = True) -> str:
    """
    Return ``text`` with the SERVER_VERSION and SERVER_FILE_ID lines replaced.

    Raises PatchTargetError for the first line pattern that is missing. Nothing
    is substituted unless both patterns are present.
    """
    version_re, file_id_re = _STRICT_PATTERNS if strict else _LOOSE_PATTERNS
    replacements: List[Tuple[re.Pattern, str]] = [
        (version_re, f'SERVER_VERSION="{candidate.serverVersion}"'),
        (file_id_re, f"SERVER_FILE_ID={candidate.id}"),
    ]

    for pattern, _ in replacements:
        if not pattern.search(text):
            raise PatchTargetError(f"Pattern not found in launch file: {pattern.pattern}", pattern=pattern.pattern)

    for pattern, line in replacements:
        # callable replacement: the version must not be read as a regex template
        text = pattern.sub(lambda _m, line=line: line, text, count=1)
    return text


def _write_atomic(path: Path, text: str) -> None:
    tmp = path.with_name(path.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        # keep the target's permission bits (launch.sh is executable)
        shutil.copymode(path, tmp)
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()


def patch_launch_file(path: Path, candidate: Candidate, *, strict: bool = True, dry_run: bool = False) -> PatchResult:
    path = Path(path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        original = f.read()

    updated = render(original, candidate, strict=strict)
    result = PatchResult(
        path=path,
        server_version=candidate.serverVersion,
        file_id=candidate.id,
        changed=updated != original,
        written=False,
    )

    if not result.changed:
        log.info("No changes needed.")
        return result

    if dry_run:
        log.info("[dry-run] Would update %s -> SERVER_VERSION=%s, SERVER_FILE_ID=%s",
                 path, candidate.serverVersion, candidate.id)
        return result

    _write_atomic(path, updated)
    result.written = True
    log.info("Updated %s -> SERVER_VERSION=%s, SERVER_FILE_ID=%s", path, candidate.serverVersion, candidate.id)
    return result
