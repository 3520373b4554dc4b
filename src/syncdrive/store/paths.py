"""Path normalization and the key scheme used for child listings."""

from __future__ import annotations

import re
from typing import Optional

SEPARATOR = "/"
ROOT = "/"

# The code point right after "/" in byte order; bounds a prefix range scan.
_SCAN_UPPER_SENTINEL = chr(ord(SEPARATOR) + 1)

_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")


def normalize_path(path: Optional[str]) -> str:
    """
    Normalize a file path into the form used as a store key.

    Rules:
        - None or blank -> "" (callers treat this as an invalid argument)
        - backslashes become "/" and repeated separators collapse
        - "." segments are dropped and ".." segments pop their parent
        - a leading "/" is added unless the path starts with a drive letter
        - no trailing separator, except for the root "/"
    """
    if path is None:
        return ""
    s = path.strip()
    if not s:
        return ""

    s = s.replace("\\", SEPARATOR)

    drive = ""
    m = _DRIVE_LETTER.match(s)
    if m:
        drive = m.group(0)
        s = s[len(drive):]

    parts: list[str] = []
    for seg in s.split(SEPARATOR):
        if seg in ("", "."):
            continue
        if seg == "..":
            if parts:
                parts.pop()
            continue
        parts.append(seg)

    return drive + SEPARATOR + SEPARATOR.join(parts)


def children_prefix(folder_path: str) -> str:
    """Return the scan prefix for a normalized folder: the path plus exactly one "/"."""
    if folder_path == ROOT or folder_path.endswith(SEPARATOR):
        return folder_path
    return folder_path + SEPARATOR


def children_scan_bounds(folder_path: str) -> tuple[str, str]:
    """
    Return the half-open key range [lower, upper) covering a folder's subtree.

    "/a" scans ["/a/", "/a0"), so "/ab/x" never falls inside the range.
    """
    lower = children_prefix(folder_path)
    upper = lower[:-1] + _SCAN_UPPER_SENTINEL
    return lower, upper


def is_immediate_child(folder_path: str, path: str) -> bool:
    prefix = children_prefix(folder_path)
    if not path.startswith(prefix):
        return False
    rest = path[len(prefix):]
    return bool(rest) and SEPARATOR not in rest
