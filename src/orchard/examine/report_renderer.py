"""Turn an AnalysisReport into ordered, human-readable report sections.

The output is plain markdown text grouped in sections so that it can be
shown in an embed, a components container or a console without changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from orchard.datatypes.analysis_datatypes import (
    UNNAMED_PROFILE,
    AnalysisReport,
    DebugInfo,
    LogError,
    ReportAttachment,
    RiskyFlagMatch,
)

REPORT_TITLE = "Config analysis"

RISKY_FLAGS_EXPLANATION = (
    '*The following flags were found in your profiles and are often included in "Fast Flag" '
    "lists promoted by YouTubers for engagement, but may not provide real benefits or could "
    "potentially cause issues:*"
)


@dataclass(frozen=True, slots=True)
class ReportSection:
    heading: str
    lines: List[str] = field(default_factory=list)

    def as_markdown(self) -> str:
        return "\n".join([f"### {self.heading}", *self.lines])


@dataclass(frozen=True, slots=True)
class ReportLink:
    label: str
    url: str


@dataclass(frozen=True, slots=True)
class RenderedReport:
    title: str
    subtitle: str
    sections: List[ReportSection]
    links: List[ReportLink]
    attachment: ReportAttachment | None = None
    has_risky_flags: bool = False

    def as_markdown(self) -> str:
        parts = [f"# {self.title}\n{self.subtitle}"]
        parts.extend(section.as_markdown() for section in self.sections)
        return "\n\n".join(parts)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: max(limit - 3, 0)]}..."


def render_system_info(debug_info: DebugInfo) -> ReportSection:
    heading = "📊 System Information"
    if debug_info.is_empty():
        return ReportSection(heading, ["- *No detailed system information found in logs.*"])

    lines: List[str] = []
    if debug_info.os_name:
        line = f"- **OS:** {debug_info.os_name}"
        if debug_info.os_version:
            line += f" {debug_info.os_version}"
        if debug_info.os_architecture:
            line += f" ({debug_info.os_architecture})"
        lines.append(line)
    if debug_info.cpu_model:
        line = f"- **CPU:** {debug_info.cpu_model}"
        if debug_info.cpu_architecture:
            line += f" ({debug_info.cpu_architecture})"
        if debug_info.cpu_threads:
            line += f" - {debug_info.cpu_threads} Threads"
        lines.append(line)
    if debug_info.ram_total:
        line = f"- **RAM:** {debug_info.ram_total} Total"
        if debug_info.ram_available:
            line += f" ({debug_info.ram_available} Available)"
        lines.append(line)
    if debug_info.app_version:
        line = f"- **AppleBlox:** v{debug_info.app_version}"
        if debug_info.app_id:
            line += f" (ID: {debug_info.app_id})"
        lines.append(line)
    if debug_info.runtime_version:
        lines.append(f"- **Neutralino:** v{debug_info.runtime_version}")
    if debug_info.roblox_version:
        lines.append(f"- **Roblox:** v{debug_info.roblox_version}")
    return ReportSection(heading, lines)


def render_errors(log_errors: List[LogError], max_errors: int, max_error_length: int) -> ReportSection:
    if not log_errors:
        return ReportSection("✅ No Errors Found", ["*No errors detected in the logs.*"])

    lines = [
        f"**{index}.** ```log\n{truncate(error, max_error_length)}\n```"
        for index, error in enumerate(log_errors[:max_errors], start=1)
    ]
    hidden = len(log_errors) - min(len(log_errors), max_errors)
    if hidden > 0:
        lines.append(f"*...and {hidden} more error(s) found in the logs.*")
    return ReportSection(f"⚠️ Errors Found ({len(log_errors)})", lines)


def format_risky_flag(match: RiskyFlagMatch) -> str:
    profile = match.profile_name if match.profile_name == UNNAMED_PROFILE else f'"{match.profile_name}"'
    return f"- `{match.flag}` (in profile {profile})"


def render_risky_flags(matches: List[RiskyFlagMatch], risk_check_performed: bool) -> ReportSection | None:
    if matches:
        return ReportSection(
            "❗ Risky Flags Detected",
            [RISKY_FLAGS_EXPLANATION, *(format_risky_flag(match) for match in matches)],
        )
    if not risk_check_performed:
        return ReportSection(
            "⚠️ Could Not Check for Risky Flags",
            ["*Failed to fetch the list of known risky flags.*"],
        )
    return None


def render_configuration(report: AnalysisReport) -> ReportSection:
    lines: List[str] = []
    if report.config_attachment is not None:
        lines.append("*The overall merged configuration is attached.*")
    elif report.merged_config:
        lines.append("*Could not attach the overall merged configuration file.*")

    if report.config_paste_url:
        lines.append("*Overall config uploaded to dpaste (link below).*")
    elif report.merged_config:
        lines.append("*Could not upload overall config to dpaste.*")

    if report.profiles_paste_url:
        lines.append("*Merged profiles uploaded to dpaste (link below).*")
    elif report.profiles:
        lines.append("*Could not upload merged profiles to dpaste.*")

    if not lines:
        lines.append("*No configuration or profile files found/processed.*")
    return ReportSection("⚙️ Configuration", lines)


def render_links(report: AnalysisReport) -> List[ReportLink]:
    links: List[ReportLink] = []
    if report.config_paste_url:
        links.append(ReportLink("Open Overall Config (dpaste)", report.config_paste_url))
    if report.profiles_paste_url:
        links.append(ReportLink("Open Merged Profiles (dpaste)", report.profiles_paste_url))
    return links


def render_report(report: AnalysisReport, max_errors: int = 5, max_error_length: int = 200) -> RenderedReport:
    """Assemble the report sections in their fixed order.

    Order: system information, errors, risky flags (only when there are
    matches or the check could not run), configuration.
    """
    completed_unix = int(report.completed_at.timestamp())
    subtitle = f"*For file `{report.bundle_name}` - Completed at <t:{completed_unix}:F>*"

    sections = [
        render_system_info(report.debug_info),
        render_errors(report.log_errors, max_errors, max_error_length),
    ]
    risky_section = render_risky_flags(report.risky_flags, report.risk_check_performed)
    if risky_section is not None:
        sections.append(risky_section)
    sections.append(render_configuration(report))

    return RenderedReport(
        title=REPORT_TITLE,
        subtitle=subtitle,
        sections=sections,
        links=render_links(report),
        attachment=report.config_attachment,
        has_risky_flags=bool(report.risky_flags),
    )
