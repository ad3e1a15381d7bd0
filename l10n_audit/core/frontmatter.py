"""
Front-matter — Recorded source revision of a localized document

Localized documents open with a YAML block between `---` fences:

    ---
    title: Array
    l10n:
      sourceCommit: 5b2a9b1c...
    ---

The recorded revision is read from one configurable dotted path
(default "l10n.sourceCommit"). A missing field, not a missing block, is
what marks a document as missing metadata.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


DEFAULT_METADATA_FIELD = "l10n.sourceCommit"

FENCE = "---"
BOM = "\ufeff"


@dataclass(frozen=True)
class LocalizationRecord:
    """On-disk state of one localized document at audit time."""
    path: str
    recorded_source_revision: Optional[str] = None
    raw_content: Optional[str] = None
    readable: bool = False
    error: Optional[str] = None

    @classmethod
    def unreadable(cls, path: str, error: str) -> 'LocalizationRecord':
        return cls(path=path, readable=False, error=error)


def split_front_matter(content: str) -> Tuple[Optional[str], str]:
    """
    Split a document into (front-matter YAML, body).

    Returns (None, content) when the document has no front-matter block.
    A leading byte order mark is ignored.
    """
    if content.startswith(BOM):
        content = content[len(BOM):]

    lines = content.splitlines(keepends=True)
    if not lines or lines[0].strip() != FENCE:
        return None, content

    for i in range(1, len(lines)):
        if lines[i].strip() == FENCE:
            return "".join(lines[1:i]), "".join(lines[i + 1:])

    # Opening fence without a closing one is body text
    return None, content


def lookup_field(data: Any, field_path: str) -> Optional[str]:
    """Resolve a dotted path (e.g. "l10n.sourceCommit") to a scalar string."""
    node = data
    for key in field_path.split("."):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]

    if node is None or isinstance(node, (dict, list)):
        return None
    value = str(node).strip()
    return value or None


def parse_front_matter(content: str) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Parse the front-matter block.

    Returns (data, error). Data is {} when there is no block or it is not
    a mapping; error is set when the YAML itself is malformed.
    """
    block, _ = split_front_matter(content)
    if block is None:
        return {}, None

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        return {}, f"Malformed front-matter: {e}"

    if not isinstance(data, dict):
        return {}, None
    return data, None


def read_localization(
    file_path: Path,
    document_path: str,
    metadata_field: str = DEFAULT_METADATA_FIELD,
) -> LocalizationRecord:
    """
    Read a localized document and its recorded source revision.

    Never raises: a file that cannot be opened or decoded yields an
    unreadable record.
    """
    try:
        content = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return LocalizationRecord.unreadable(document_path, str(e))

    data, error = parse_front_matter(content)
    return LocalizationRecord(
        path=document_path,
        recorded_source_revision=lookup_field(data, metadata_field),
        raw_content=content,
        readable=True,
        error=error,
    )
