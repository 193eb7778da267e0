"""Upload large report payloads to dpaste."""

from __future__ import annotations

import asyncio

import requests

from orchard.util.logger import get_logger

logger = get_logger("paste_upload")


def _post_paste(content: str, syntax: str, endpoint: str, timeout: float) -> str | None:
    try:
        response = requests.post(
            endpoint,
            data={"content": content, "syntax": syntax},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logger.error("[PASTE] dpaste upload network/request error: %s", exc)
        return None

    if not response.ok:
        logger.error(
            "[PASTE] dpaste upload failed: %s %s. Response: %s",
            response.status_code,
            response.reason,
            response.text,
        )
        return None

    url = response.text.strip()
    logger.info("[PASTE] dpaste upload successful: %s", url)
    return url or None


async def upload_to_paste(content: str, syntax: str, endpoint: str, timeout: float = 15.0) -> str | None:
    """Upload ``content`` and return the paste URL, or ``None`` on any failure."""
    if not content:
        return None
    logger.info("[PASTE] Uploading content (syntax: %s) to dpaste...", syntax)
    return await asyncio.to_thread(_post_paste, content, syntax, endpoint, timeout)
