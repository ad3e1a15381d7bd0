"""
Status Classification — Four terminal states of a localized document

Pure decision table, evaluated in order:
    1. localized document unreadable      -> UNTRANSLATED
    2. no recorded source revision        -> MISSING_META
    3. recorded == latest                 -> UP_TO_DATE
    4. otherwise                          -> OUTDATED

No I/O. The caller decides what extra work each status needs.
"""

from enum import Enum
from typing import Optional


class AuditStatus(str, Enum):
    """Status of a localized document. Values are the report literals."""
    UP_TO_DATE = "up_to_date"
    OUTDATED = "outdated"
    MISSING_META = "missing_meta"
    UNTRANSLATED = "untranslated"

    @property
    def needs_diff(self) -> bool:
        return self is AuditStatus.OUTDATED

    @property
    def needs_source_content(self) -> bool:
        """Localized text cannot guide re-translation; ship the source."""
        return self in (AuditStatus.MISSING_META, AuditStatus.UNTRANSLATED)


def classify(
    recorded_source_revision: Optional[str],
    latest_revision: str,
    localized_readable: bool,
) -> AuditStatus:
    """Classify one localized document."""
    if not localized_readable:
        return AuditStatus.UNTRANSLATED
    if not recorded_source_revision:
        return AuditStatus.MISSING_META
    if recorded_source_revision == latest_revision:
        return AuditStatus.UP_TO_DATE
    return AuditStatus.OUTDATED
