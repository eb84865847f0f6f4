from __future__ import annotations
from enum import Enum


class PrincipalRole(str, Enum):
    FEED = "FEED"
    AUDITOR = "AUDITOR"


class IngestOutcome(str, Enum):
    inserted = "inserted"
    transferred = "transferred"
    unchanged = "unchanged"
    refreshed = "refreshed"
