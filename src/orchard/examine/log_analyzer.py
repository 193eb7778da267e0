"""Scan AppleBlox log files for errors and embedded system information.

The debug-info blocks are free text written by AppleBlox itself, e.g.::

    OS Info:
      Name: macOS
      Version: 14.5
      Architecture: arm64

The block and label patterns below mirror that format exactly. AppleBlox owns
the format, so the matching rules must not be loosened or tidied up without
checking what the application actually writes.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Tuple

from orchard.datatypes.analysis_datatypes import DebugInfo, LogError
from orchard.util.logger import get_logger

logger = get_logger("log_analyzer")

LOG_EXTENSION = ".log"

# First matching pattern wins; a line is reported at most once.
ERROR_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(error|err|exception|exc|fail|failure)\b:?.*$", re.IGNORECASE),
    re.compile(r"Cannot perform", re.IGNORECASE),
    re.compile(r"could not", re.IGNORECASE),
    re.compile(r"\{\s*\"code\"\s*:\s*\"NE_", re.IGNORECASE),
    re.compile(r"Error while", re.IGNORECASE),
)

TIMESTAMP_PATTERN = re.compile(r"^\[\s*(.*?)\s*\]")
TIMESTAMP_PREFIX_PATTERN = re.compile(r"^\[\s*(.*?)\s*\]\s*")

# (field, block name, label)
DEBUG_INFO_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("os_name", "OS Info", "Name"),
    ("os_version", "OS Info", "Version"),
    ("os_architecture", "OS Info", "Architecture"),
    ("cpu_model", "CPU Info", "Model"),
    ("cpu_architecture", "CPU Info", "Architecture"),
    ("cpu_threads", "CPU Info", "Logical Threads"),
    ("ram_total", "Memory Info", "Physical Total"),
    ("ram_available", "Memory Info", "Physical Available"),
    ("app_version", "Application Info", "Version"),
    ("app_id", "Application Info", "Application ID"),
    ("runtime_version", "Neutralino Info", "Version"),
)

ROBLOX_LOG_PATH_VERSION = re.compile(r"Found latest log file:.*?/Roblox/([\d.]+)_")
ROBLOX_LAUNCH_VERSION = re.compile(r"(?:Launching Roblox.*?Version:|version)\s*([\d.]+)", re.IGNORECASE)


def extract_errors_from_log(log_content: str, file_name: str) -> List[LogError]:
    """Return one entry per error-looking line, prefixed with the file name.

    A leading ``[...]`` token is treated as a timestamp: it is moved into the
    prefix (``file [ts]: message``) and removed from the message.
    """
    errors: List[LogError] = []
    for line in log_content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        if not any(pattern.search(trimmed) for pattern in ERROR_PATTERNS):
            continue

        timestamp_match = TIMESTAMP_PATTERN.match(trimmed)
        prefix = f"{file_name} [{timestamp_match.group(1)}]" if timestamp_match else file_name
        message = TIMESTAMP_PREFIX_PATTERN.sub("", trimmed, count=1)
        errors.append(f"{prefix}: {message}")
    return errors


def _block_pattern(block: str) -> re.Pattern[str]:
    # A block runs until a blank line or the next capitalized "Section:" header.
    return re.compile(
        rf"{re.escape(block)}\s*:\s*([\s\S]*?)(?=\n\n|\n[A-Z][a-zA-Z ]+\s*:|\Z)"
    )


def _label_pattern(label: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*{re.escape(label)}:\s*(.*)$", re.MULTILINE)


def extract_block_value(block: str, label: str, log_content: str) -> str | None:
    """Return the value of ``label`` inside the first ``block`` section, if any."""
    block_match = _block_pattern(block).search(log_content)
    if not block_match or not block_match.group(1):
        return None
    value_match = _label_pattern(label).search(block_match.group(1))
    if not value_match:
        return None
    return value_match.group(1).strip() or None


def extract_roblox_version(log_content: str) -> str | None:
    match = ROBLOX_LOG_PATH_VERSION.search(log_content)
    if match is None:
        match = ROBLOX_LAUNCH_VERSION.search(log_content)
    return match.group(1).strip() if match else None


def extract_debug_info_from_log(log_content: str) -> DebugInfo:
    """Parse the labeled system-information blocks of one log file."""
    debug_info = DebugInfo()
    for field_name, block, label in DEBUG_INFO_FIELDS:
        setattr(debug_info, field_name, extract_block_value(block, label, log_content))
    debug_info.roblox_version = extract_roblox_version(log_content)
    return debug_info


def find_log_files(extract_path: Path) -> List[Path]:
    """List the ``.log`` files of ``logs/``, or of the extraction root when there is no such folder."""
    logs_path = extract_path / "logs"
    if logs_path.is_dir():
        base_path = logs_path
    else:
        logger.info("[LOGS] No logs folder found, checking root directory.")
        if not extract_path.is_dir():
            logger.warning("[LOGS] Root extraction path %s does not exist.", extract_path)
            return []
        base_path = extract_path

    try:
        entries = [entry for entry in base_path.iterdir() if entry.name.endswith(LOG_EXTENSION)]
    except OSError as exc:
        logger.error("[LOGS] Could not list log directory %s: %s", base_path, exc)
        return []
    return sorted(entries, key=lambda entry: entry.name)


def analyze_log_files(extract_path: Path) -> Tuple[DebugInfo, List[LogError]]:
    """Collect debug info and error lines from every log file of an extracted bundle.

    An unreadable file contributes a ``System Error`` entry instead of
    aborting the scan. Debug info from later files overwrites earlier values.
    """
    debug_info = DebugInfo()
    errors: List[LogError] = []

    log_files = find_log_files(extract_path)
    if not log_files:
        logger.info("[LOGS] No log files found.")
        return debug_info, errors

    for log_file in log_files:
        try:
            log_content = log_file.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.error("[LOGS] Error reading log file %s: %s", log_file.name, exc)
            errors.append(f"System Error: Could not read log file {log_file.name}")
            continue

        file_errors = extract_errors_from_log(log_content, log_file.name)
        errors.extend(file_errors)
        debug_info.merge(extract_debug_info_from_log(log_content))
        logger.debug("[LOGS] %s: %d error line(s)", log_file.name, len(file_errors))

    logger.info("[LOGS] Scanned %d log file(s), found %d error line(s)", len(log_files), len(errors))
    return debug_info, errors
