"""Rewrite absolute paths under a base directory into base-relative form.

Both POSIX (/home/me/proj) and Windows (C:\\Users\\me\\proj) paths are
recognized regardless of the host platform, since a session may have been
recorded elsewhere.
"""

import ntpath
import os
import posixpath
import re

_WINDOWS_ABS_RE = re.compile(r"^(?:[A-Za-z]:[\\/]|\\\\)")

# Characters that end a path embedded in free text.
_PATH_TAIL = r"[^\s\"'<>|]*"


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or bool(_WINDOWS_ABS_RE.match(path))


def _flavor(path: str):
    return ntpath if _WINDOWS_ABS_RE.match(path) else posixpath


def _canonical_base(base_path: str):
    """Return (path module, normalized absolute base)."""
    if _is_absolute(base_path):
        flavor = _flavor(base_path)
        return flavor, flavor.normpath(base_path)
    return os.path, os.path.abspath(base_path)


def _is_within(flavor, path: str, base: str) -> bool:
    try:
        common = flavor.commonpath([base, path])
    except ValueError:
        # Different drives, or absolute mixed with relative.
        return False
    return flavor.normcase(common) == flavor.normcase(base)


def sanitize_path(path: str, base_path: str) -> str:
    """Convert an absolute path to one relative to base_path.

    Paths outside base_path, relative paths, and empty inputs come back
    unchanged. A path equal to base_path becomes ".".
    """
    if not path or not base_path or not _is_absolute(path):
        return path

    flavor, base = _canonical_base(base_path)
    if _flavor(path) is not flavor:
        return path

    target = flavor.normpath(path)
    if not _is_within(flavor, target, base):
        return path

    return flavor.relpath(target, base)


def sanitize_paths_in_text(text: str, base_path: str) -> str:
    """Rewrite base-path occurrences embedded in free text.

    Only an occurrence followed by a separator is rewritten, and only the
    path itself: "see /base/proj/src/x.ts:12" -> "see src/x.ts:12".
    """
    if not text or not base_path:
        return text

    flavor, base = _canonical_base(base_path)
    base = base.rstrip("/\\")
    if not base:
        return text

    segments = re.split(r"[\\/]", base)
    pattern = (
        r"(?<![\w.\-])"
        + r"[\\/]".join(re.escape(s) for s in segments)
        + r"[\\/](?P<rest>" + _PATH_TAIL + ")"
    )
    flags = re.IGNORECASE if flavor is ntpath else 0

    return re.sub(pattern, lambda m: m.group("rest") or ".", text, flags=flags)
