"""Merge the JSON configuration files of an extracted bundle.

Layout handled::

    config/            (or the extraction root when absent)
      settings.json    -> merged["settings"]
      fastflags.json   -> merged["fastflags"]
      profiles/
        default.json   -> Profile
        gaming.json    -> Profile
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Tuple

import jsonschema
from jsonschema import ValidationError

from orchard.datatypes.analysis_datatypes import MergedConfig, Profile, ProfileFlag
from orchard.util.logger import get_logger

logger = get_logger("config_merger")

JSON_EXTENSION = ".json"

PROFILE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "flags": {"type": ["array", "null"]},
    },
}

PROFILE_FLAG_SCHEMA: dict = {
    "type": "object",
    "required": ["flag"],
    "properties": {
        "flag": {"type": "string"},
    },
}


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _json_files(directory: Path) -> List[Path]:
    return sorted(
        (entry for entry in directory.iterdir() if entry.name.endswith(JSON_EXTENSION)),
        key=lambda entry: entry.name,
    )


def parse_profile(data: Any, source: str) -> Profile | None:
    """Validate a parsed profile file and keep only trustworthy flag entries.

    Returns ``None`` (after logging a warning) when the document is not a
    profile object at all. Flag entries without a string ``flag`` are left
    out of ``flags`` but remain in ``raw``.
    """
    try:
        jsonschema.validate(instance=data, schema=PROFILE_SCHEMA)
    except ValidationError as exc:
        logger.warning("[CONFIG] Discarding profile %s: %s", source, exc.message)
        return None

    flags: List[ProfileFlag] = []
    for index, entry in enumerate(data.get("flags") or []):
        try:
            jsonschema.validate(instance=entry, schema=PROFILE_FLAG_SCHEMA)
        except ValidationError as exc:
            logger.warning("[CONFIG] Skipping flag entry %d of profile %s: %s", index, source, exc.message)
            continue
        flags.append(ProfileFlag(flag=entry["flag"], value=entry.get("value")))

    return Profile(source=source, name=data.get("name") or None, flags=flags, raw=data)


def merge_profiles(profiles_path: Path) -> List[Profile]:
    profiles: List[Profile] = []
    logger.info("[CONFIG] Processing profiles folder: %s", profiles_path)
    for profile_file in _json_files(profiles_path):
        try:
            data = _read_json(profile_file)
        except (OSError, ValueError) as exc:
            logger.error("[CONFIG] Error parsing profile file %s: %s", profile_file.name, exc)
            continue

        profile = parse_profile(data, profile_file.name)
        if profile is not None:
            profiles.append(profile)
            logger.info("[CONFIG] Merged profile file: %s", profile_file.name)
    return profiles


def merge_config_files(extract_path: Path) -> Tuple[MergedConfig | None, List[Profile] | None]:
    """Merge top-level JSON files and collect profiles from an extracted bundle.

    Parameters
    ----------
    extract_path:
        Root of the extracted bundle.

    Returns
    -------
    tuple
        ``(merged_config, profiles)``; each is ``None`` when nothing was found.
    """
    config_dir = extract_path / "config"
    if config_dir.is_dir():
        logger.info("[CONFIG] Found config folder.")
    else:
        logger.info("[CONFIG] No config folder found, checking root directory for JSON files.")
        config_dir = extract_path
        if not config_dir.is_dir():
            logger.warning("[CONFIG] Root extraction path %s does not exist either.", extract_path)
            return None, None

    merged: MergedConfig = {}
    profiles: List[Profile] = []
    profiles_path = config_dir / "profiles"

    try:
        for config_file in _json_files(config_dir):
            if config_file.is_dir():
                logger.info("[CONFIG] Skipping directory %s while reading main config.", config_file.name)
                continue
            try:
                merged[config_file.stem] = _read_json(config_file)
            except (OSError, ValueError) as exc:
                logger.error("[CONFIG] Error parsing config file %s: %s", config_file.name, exc)
                continue
            logger.info("[CONFIG] Merged overall config file: %s", config_file.name)

        if profiles_path.is_dir():
            profiles = merge_profiles(profiles_path)
        else:
            logger.info("[CONFIG] Profiles subdirectory not found at %s", profiles_path)
    except OSError as exc:
        logger.error("[CONFIG] Error reading config directory %s: %s", config_dir, exc)

    return (merged or None), (profiles or None)
