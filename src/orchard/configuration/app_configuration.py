from __future__ import annotations
from pathlib import Path
import fcntl
import os
from typing import Any, Dict, List
import yaml

from orchard.configuration.ai_settings import AISettings
from orchard.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_RISK_LIST_URL = (
    "https://raw.githubusercontent.com/AppleBlox/flagsman/refs/heads/main/data/risklist.json"
)
DEFAULT_PASTE_ENDPOINT = "https://dpaste.com/api/v2/"

DEFAULT_DELETE_KEYWORDS = [
    "ixp",
    "~/library/roblox",
    "/library/roblox",
    "roblox cache",
    "modify cache",
    "edit cache",
    "cache bypass",
    "fps unlock",
    "bypass restrictions",
    "bypass whitelist",
    "bypass fastflag",
    "fastflag bypass",
    "flag bypass",
]

DEFAULT_REPLY_KEYWORDS = [
    "/users/",
    "fps unlocker",
    "unlock fps",
    "clientsettings",
    "clientappsettings",
]


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key, {})
    return value if isinstance(value, dict) else {}


def _string_list(value: Any, default: List[str]) -> List[str]:
    if not isinstance(value, list):
        return list(default)
    return [str(item).lower() for item in value if item]


class ExamineSettings:
    """Settings for the diagnostic bundle analyzer (``examine`` section)."""

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    @property
    def staging_dir(self) -> Path:
        return Path(self.data.get("staging_dir") or "./.zips").resolve()

    @property
    def risk_list_url(self) -> str:
        return str(self.data.get("risk_list_url") or DEFAULT_RISK_LIST_URL)

    @property
    def paste_endpoint(self) -> str:
        return str(self.data.get("paste_endpoint") or DEFAULT_PASTE_ENDPOINT)

    @property
    def request_timeout(self) -> float:
        return float(self.data.get("request_timeout_seconds") or 15.0)

    @property
    def max_displayed_errors(self) -> int:
        return int(self.data.get("max_displayed_errors") or 5)

    @property
    def max_error_length(self) -> int:
        return int(self.data.get("max_error_length") or 200)

    @property
    def max_attachment_bytes(self) -> int:
        return int(self.data.get("max_attachment_bytes") or 8 * 1024 * 1024)


class BypassSettings:
    """Settings for the FastFlag bypass detector (``bypass_detection`` section)."""

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    @property
    def enabled(self) -> bool:
        return bool(self.data.get("enabled", True))

    @property
    def log_channel_id(self) -> int | None:
        """Channel receiving deleted-message reports; ``BYPASS_LOG_CHANNEL_ID`` wins."""
        raw = os.getenv("BYPASS_LOG_CHANNEL_ID") or self.data.get("log_channel_id")
        try:
            return int(raw) if raw else None
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid bypass log channel id: %r", raw)
            return None

    @property
    def min_message_length(self) -> int:
        return int(self.data.get("min_message_length") or 10)

    @property
    def delete_keywords(self) -> List[str]:
        return _string_list(self.data.get("delete_keywords"), DEFAULT_DELETE_KEYWORDS)

    @property
    def reply_keywords(self) -> List[str]:
        return _string_list(self.data.get("reply_keywords"), DEFAULT_REPLY_KEYWORDS)

    @property
    def purge_keywords(self) -> List[str]:
        """Every keyword from both lists, for the purge command."""
        seen: Dict[str, None] = {}
        for keyword in self.delete_keywords + self.reply_keywords:
            seen.setdefault(keyword, None)
        return list(seen)

    @property
    def warning_image_url(self) -> str | None:
        val = self.data.get("warning_image_url")
        return str(val) if val else None


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml``, exposes dictionary-like
    access helpers, and wraps each section in a typed settings helper.
    Uses fcntl file locks for safe concurrent access across processes.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping.

        The returned dict is the internal cache; callers should not mutate it.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def examine(self) -> ExamineSettings:
        return ExamineSettings(_section(self._data, "examine"))

    @property
    def bypass_detection(self) -> BypassSettings:
        return BypassSettings(_section(self._data, "bypass_detection"))

    @property
    def ai_settings(self) -> AISettings:
        return AISettings(_section(self._data, "ai_settings"))

    @property
    def staff_role_ids(self) -> List[int]:
        """Role IDs whose members may run staff-only commands."""
        raw = self._data.get("staff_role_ids") or []
        if not isinstance(raw, list):
            return []
        role_ids: List[int] = []
        for item in raw:
            try:
                role_ids.append(int(item))
            except (TypeError, ValueError):
                logger.warning("[APP CONFIGURATION] Ignoring invalid staff role id %r", item)
        return role_ids

    @property
    def tags_path(self) -> Path:
        return Path(self._data.get("tags_path") or "./config/tags.yml").resolve()


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
