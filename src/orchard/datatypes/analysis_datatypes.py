"""
Data structures for the diagnostic bundle analyzer.

These types flow through the examine pipeline: the log analyzer produces
``DebugInfo`` and log error lines, the config merger produces the merged
configuration and ``Profile`` entries, the risky-flag checker produces
``RiskyFlagMatch`` tuples, and everything ends up in an ``AnalysisReport``.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, NamedTuple

# A single error line: "<file>[ [<timestamp>]]: <message>"
LogError = str

# Base file name (without ".json") -> parsed JSON value
MergedConfig = Dict[str, Any]

UNNAMED_PROFILE = "(Unnamed Profile)"


@dataclass(slots=True)
class DebugInfo:
    """System and application details recovered from AppleBlox log files."""

    os_name: str | None = None
    os_version: str | None = None
    os_architecture: str | None = None
    cpu_model: str | None = None
    cpu_architecture: str | None = None
    cpu_threads: str | None = None
    ram_total: str | None = None
    ram_available: str | None = None
    app_version: str | None = None
    app_id: str | None = None
    runtime_version: str | None = None
    roblox_version: str | None = None

    def merge(self, other: DebugInfo) -> None:
        """Overwrite fields with every value ``other`` provides (last write wins)."""
        for item in fields(self):
            value = getattr(other, item.name)
            if value is not None:
                setattr(self, item.name, value)

    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))


@dataclass(slots=True)
class ProfileFlag:
    """One validated flag entry of a profile."""

    flag: str
    value: Any = None


@dataclass(slots=True)
class Profile:
    """A parsed profile file from ``config/profiles``.

    Attributes:
        source: File name the profile was read from
        name: Display name, when the profile provides a string ``name``
        flags: Flag entries that passed validation, in file order
        raw: The parsed JSON object exactly as found in the file
    """

    source: str
    name: str | None
    flags: List[ProfileFlag] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.name if self.name else UNNAMED_PROFILE


class RiskyFlagMatch(NamedTuple):
    """A denylisted flag found in a profile."""

    profile_name: str
    flag: str


@dataclass(frozen=True, slots=True)
class ReportAttachment:
    """A file offered alongside the report (the merged configuration)."""

    filename: str
    description: str
    data: bytes


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Everything the examine pipeline learned about one bundle."""

    bundle_name: str
    completed_at: datetime.datetime
    debug_info: DebugInfo
    log_errors: List[LogError]
    merged_config: MergedConfig | None
    profiles: List[Profile] | None
    risky_flags: List[RiskyFlagMatch]
    risk_check_performed: bool
    config_attachment: ReportAttachment | None = None
    config_paste_url: str | None = None
    profiles_paste_url: str | None = None
