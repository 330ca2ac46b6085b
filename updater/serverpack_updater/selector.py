"""
Server pack selection
---------------------
Picks the newest server pack out of a project's file listing and derives the
version string that goes into the launch script.

Two policies are available:

- ``strict``: only files flagged ``isServerPack`` or named
  ``ServerFiles-<version>.zip`` are considered, and the version must come from
  that exact file name.
- ``pointer``: the newest file that is a server pack or points at one via
  ``serverPackFileId`` wins; the pointer is resolved through the API. Versions
  fall back to the first semver-looking substring of the file name.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional

from .errors import SelectionError
from .logging_setup import get_logger
from .models import Candidate, FileRecord, SelectionPolicy

log = get_logger("serverpack.updater.selector")

STRICT_NAME_RE = re.compile(r"^ServerFiles-(.+)\.zip$")
STRICT_NAME_RE_I = re.compile(r"^ServerFiles-(.+)\.zip$", re.IGNORECASE)
LOOSE_VERSION_RE = re.compile(r"\d+\.\d+\.\d+(?:-[A-Za-z0-9.]+)?")

# resolves a serverPackFileId to the referenced file record
FileResolver = Callable[[int], FileRecord]


def sort_newest_first(files: Iterable[FileRecord]) -> List[FileRecord]:
    """Descending by file date, ties broken by the higher id."""
    return sorted(files, key=lambda f: (f.timestamp(), f.id), reverse=True)


def parse_strict_version(file_name: str) -> Optional[str]:
    # expected: ServerFiles-0.10.0-beta.zip
    m = STRICT_NAME_RE.match(file_name or "")
    return m.group(1) if m else None


def extract_version(file_name: str) -> Optional[str]:
    name = file_name or ""
    m = STRICT_NAME_RE_I.match(name)
    if m:
        return m.group(1)
    # the pre-release tag allows dots, so ".zip" would otherwise end up in it
    stem = re.sub(r"\.zip$", "", name, flags=re.IGNORECASE)
    m = LOOSE_VERSION_RE.search(stem)
    return m.group(0) if m else None


def _is_strict_server_file(f: FileRecord) -> bool:
    if f.isServerPack is True:
        return True
    name = f.fileName
    return isinstance(name, str) and name.startswith("ServerFiles-") and name.endswith(".zip")


def select_strict(files: Iterable[FileRecord]) -> Candidate:
    candidates = []
    for f in files:
        if not _is_strict_server_file(f):
            continue
        version = parse_strict_version(f.fileName or "")
        if not version:
            log.debug("Skipping %s: file name does not carry a version", f.fileName)
            continue
        candidates.append((f, version))

    if not candidates:
        raise SelectionError("No ServerFiles-*.zip (or isServerPack=true) found for this project.")

    candidates.sort(key=lambda c: (c[0].timestamp(), c[0].id), reverse=True)
    latest, version = candidates[0]
    return Candidate(id=latest.id, fileName=latest.fileName or "", serverVersion=version)


def _looks_like_server_file(name: Optional[str]) -> bool:
    lowered = (name or "").lower()
    return lowered.startswith("serverfiles-") and lowered.endswith(".zip")


def select_pointer(files: Iterable[FileRecord], resolve: FileResolver) -> Candidate:
    ordered = sort_newest_first(files)

    target: Optional[FileRecord] = None
    marked = next((f for f in ordered if f.serverPackFileId or f.isServerPack), None)
    if marked is not None:
        if marked.serverPackFileId:
            log.info("File %s (%s) points at server pack %s, resolving",
                     marked.id, marked.fileName, marked.serverPackFileId)
            target = resolve(marked.serverPackFileId)
        else:
            target = marked
    else:
        target = next((f for f in ordered if _looks_like_server_file(f.fileName)), None)

    if target is None:
        raise SelectionError("No server pack (serverPackFileId, isServerPack or ServerFiles-*.zip) found for this project.")

    version = extract_version(target.fileName or "")
    if not version:
        raise SelectionError(f"Could not extract a server version from file name {target.fileName!r} (id={target.id})")
    return Candidate(id=target.id, fileName=target.fileName or "", serverVersion=version)


def select_latest(
    files: Iterable[FileRecord],
    policy: SelectionPolicy = SelectionPolicy.POINTER,
    resolve: Optional[FileResolver] = None,
) -> Candidate:
    if policy is SelectionPolicy.STRICT:
        return select_strict(files)
    if resolve is None:
        raise ValueError("pointer policy needs a resolver for serverPackFileId")
    return select_pointer(files, resolve)
