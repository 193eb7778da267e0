"""End-to-end analysis of an uploaded AppleBlox diagnostic bundle.

Stages run strictly in sequence::

    download -> staging/extraction -> log scan + config merge -> risk list fetch
             -> risky flag check -> attachment + paste uploads -> AnalysisReport

Only download and extraction failures abort a run; every other stage logs
its failure and leaves a "could not" note in the report.
"""

from __future__ import annotations

import asyncio
import datetime
import json
from pathlib import Path
from typing import List, Tuple

import discord

from orchard.configuration.app_configuration import ExamineSettings
from orchard.datatypes.analysis_datatypes import (
    AnalysisReport,
    DebugInfo,
    LogError,
    MergedConfig,
    Profile,
    ReportAttachment,
)
from orchard.examine.archive_stager import staged_bundle
from orchard.examine.config_merger import merge_config_files
from orchard.examine.errors import DownloadError
from orchard.examine.log_analyzer import analyze_log_files
from orchard.examine.paste_upload import upload_to_paste
from orchard.examine.risky_flags import check_risky_flags, fetch_risky_flags
from orchard.util.logger import get_logger

logger = get_logger("examine_pipeline")

BUNDLE_EXTENSION = ".zip"


def find_bundle_attachment(message: discord.Message) -> discord.Attachment | None:
    """Return the first ``.zip`` attachment of a message."""
    for attachment in message.attachments:
        if attachment.filename and attachment.filename.endswith(BUNDLE_EXTENSION):
            return attachment
    return None


async def download_bundle(attachment: discord.Attachment) -> bytes:
    """Download an attachment's bytes.

    Raises
    ------
    DownloadError
        If Discord's CDN refuses or fails the request.
    """
    logger.info("[EXAMINE] Downloading from %s...", attachment.url)
    try:
        data = await attachment.read()
    except discord.HTTPException as exc:
        raise DownloadError(f"Failed to download: {exc}") from exc
    if not data:
        raise DownloadError("Failed to download: the attachment is empty")
    return data


def analyze_extracted_bundle(
    extract_path: Path,
) -> Tuple[DebugInfo, List[LogError], MergedConfig | None, List[Profile] | None]:
    """Run the log analyzer and the config merger over an extracted tree."""
    debug_info, log_errors = analyze_log_files(extract_path)
    merged_config, profiles = merge_config_files(extract_path)
    return debug_info, log_errors, merged_config, profiles


def stage_and_analyze(
    bundle_bytes: bytes, bundle_name: str, staging_root: Path
) -> Tuple[DebugInfo, List[LogError], MergedConfig | None, List[Profile] | None]:
    """Extract the bundle into its own staging directory and analyze it there."""
    with staged_bundle(bundle_bytes, bundle_name, staging_root) as extract_path:
        return analyze_extracted_bundle(extract_path)


def build_config_attachment(
    merged_config: MergedConfig,
    completed_at: datetime.datetime,
    max_bytes: int,
) -> ReportAttachment | None:
    """Serialize the merged config as a file attachment, or ``None`` if that is not possible."""
    try:
        data = json.dumps(merged_config, indent=2, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        logger.error("[EXAMINE] Error creating overall config file for attachment: %s", exc)
        return None

    if len(data) > max_bytes:
        logger.error(
            "[EXAMINE] Merged config is %d bytes, over the %d byte attachment limit.", len(data), max_bytes
        )
        return None

    logger.info("[EXAMINE] Overall merged config file created for attachment.")
    return ReportAttachment(
        filename=f"appleblox-config-overall-{completed_at.date().isoformat()}.json",
        description="Merged Overall AppleBlox Configuration",
        data=data,
    )


def serialize_json(value) -> str | None:
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        logger.error("[EXAMINE] Error serializing JSON payload: %s", exc)
        return None


async def examine_bundle(bundle_bytes: bytes, bundle_name: str, settings: ExamineSettings) -> AnalysisReport:
    """Analyze a downloaded bundle and return the assembled report.

    Raises
    ------
    ExtractionError
        If the bundle cannot be staged or extracted.
    """
    debug_info, log_errors, merged_config, profiles = await asyncio.to_thread(
        stage_and_analyze, bundle_bytes, bundle_name, settings.staging_dir
    )

    risky_flags = await fetch_risky_flags(settings.risk_list_url, settings.request_timeout)
    risk_check_performed = risky_flags is not None

    risky_matches = []
    if risk_check_performed and profiles:
        logger.info("[EXAMINE] Checking profiles for risky flags...")
        risky_matches = check_risky_flags(profiles, risky_flags)

    completed_at = datetime.datetime.now(datetime.timezone.utc)

    config_attachment = None
    config_paste_url = None
    if merged_config:
        config_attachment = build_config_attachment(merged_config, completed_at, settings.max_attachment_bytes)
        config_json = serialize_json(merged_config)
        if config_json:
            config_paste_url = await upload_to_paste(
                config_json, "json", settings.paste_endpoint, settings.request_timeout
            )

    profiles_paste_url = None
    if profiles:
        profiles_json = serialize_json([profile.raw for profile in profiles])
        if profiles_json:
            profiles_paste_url = await upload_to_paste(
                profiles_json, "json", settings.paste_endpoint, settings.request_timeout
            )
    else:
        logger.info("[EXAMINE] No profiles found or merged to upload.")

    return AnalysisReport(
        bundle_name=bundle_name,
        completed_at=completed_at,
        debug_info=debug_info,
        log_errors=log_errors,
        merged_config=merged_config,
        profiles=profiles,
        risky_flags=risky_matches,
        risk_check_performed=risk_check_performed,
        config_attachment=config_attachment,
        config_paste_url=config_paste_url,
        profiles_paste_url=profiles_paste_url,
    )
