"""Cross-reference merged profiles against the community risky-flag list."""

from __future__ import annotations

import asyncio
from typing import Iterable, List

import requests

from orchard.datatypes.analysis_datatypes import Profile, RiskyFlagMatch
from orchard.util.logger import get_logger

logger = get_logger("risky_flags")


def check_risky_flags(
    profiles: Iterable[Profile] | None,
    risky_flags: frozenset[str] | set[str] | None,
) -> List[RiskyFlagMatch]:
    """Return every (profile, flag) pair whose flag is on the risk list.

    Matches follow profile order, then flag order within a profile. A flag
    used by several profiles yields one match per profile.
    """
    if not risky_flags or not profiles:
        return []

    matches: List[RiskyFlagMatch] = []
    for profile in profiles:
        for entry in profile.flags:
            if entry.flag in risky_flags:
                match = RiskyFlagMatch(profile_name=profile.display_name, flag=entry.flag)
                matches.append(match)
                logger.warning("[RISK] Found risky flag %s in profile %s", entry.flag, match.profile_name)
    return matches


def _download_risk_list(url: str, timeout: float) -> frozenset[str] | None:
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("[RISK] Error fetching risk list: %s", exc)
        return None

    if response.status_code != 200:
        logger.error("[RISK] Failed to fetch risk list: %s %s", response.status_code, response.reason)
        return None

    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("[RISK] Risk list is not valid JSON: %s", exc)
        return None

    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        logger.error("[RISK] Fetched risk list was not a valid JSON array of strings.")
        return None

    risky = frozenset(payload)
    logger.info("[RISK] Successfully fetched and parsed %d risky flag names.", len(risky))
    return risky


async def fetch_risky_flags(url: str, timeout: float = 15.0) -> frozenset[str] | None:
    """Fetch the risky flag names, or ``None`` when the check cannot be performed.

    The request runs in a worker thread so the event loop keeps serving
    other interactions.
    """
    logger.info("[RISK] Fetching risk list from %s...", url)
    return await asyncio.to_thread(_download_risk_list, url, timeout)
