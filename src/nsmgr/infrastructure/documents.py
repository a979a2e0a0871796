"""JSON document files: the namespace map and settings snapshots.

A missing namespace map is not an error (it describes no namespaces), but
an unreadable file or malformed JSON is fatal.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from nsmgr.domain.errors import InvalidConfigError, NamespaceConfigError
from nsmgr.domain.namespaces import (
    DEFAULT_ADMIN_GROUP,
    NamespaceMap,
    describe_errors,
    parse_namespace_map,
)
from nsmgr.domain.settings import WikiSettings

logger = logging.getLogger(__name__)


class DocumentError(NamespaceConfigError):
    """A JSON document could not be read or decoded."""

    code = "UNREADABLE"


class InvalidJsonError(DocumentError):
    code = "INVALID_JSON"


def read_json_document(path: Path, *, missing_ok: bool = False) -> Any:
    """Read and decode *path*.

    Returns an empty object when the file is missing and *missing_ok*.

    Raises:
        DocumentError: The file is missing (and not *missing_ok*) or unreadable.
        InvalidJsonError: The file is not well-formed JSON.
    """
    if not path.exists():
        if missing_ok:
            logger.debug("No document at %s, using an empty one", path)
            return {}
        raise DocumentError(f"Can't read {path}: no such file.", path=str(path))

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Can't read {path}: {exc.strerror}.", path=str(path)) from exc
    except UnicodeDecodeError as exc:
        msg = f"Can't read {path}: not UTF-8 (byte {exc.start})."
        raise DocumentError(msg, path=str(path)) from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"JSON not well-formed in {path}: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        raise InvalidJsonError(msg, path=str(path)) from exc


def load_namespace_map(path: Path, *, default_admin: str = DEFAULT_ADMIN_GROUP) -> NamespaceMap:
    """Read and parse a namespace map file (missing file = empty map)."""
    raw = read_json_document(path, missing_ok=True)
    return parse_namespace_map(raw, default_admin=default_admin)


def load_settings(path: Path | None) -> WikiSettings:
    """Read a settings snapshot, or start from empty settings when *path* is None."""
    if path is None:
        return WikiSettings()
    raw = read_json_document(path)
    if not isinstance(raw, dict):
        raise DocumentError(f"Settings snapshot {path} must be a JSON object.", path=str(path))
    try:
        return WikiSettings.from_document(raw)
    except ValidationError as exc:
        problems = describe_errors(exc)
        msg = f"Invalid settings snapshot {path}: {problems[0]}"
        raise InvalidConfigError(msg, path=str(path), errors=problems) from exc
