import os
from typing import Any, Dict

DEFAULT_CLASSIFIER_PROMPT = (
    "You are a content moderation assistant for a Discord server about AppleBlox "
    "(a Roblox mod manager). Your job is to detect if messages discuss bypassing Roblox "
    "FastFlag restrictions or modifying Roblox cache files to unlock FPS or bypass "
    "restrictions. Respond ONLY with a JSON object in this format: "
    '{"action": "delete"|"reply"|"none", "confidence": 0.0-1.0}. '
    'Use "delete" for messages directly instructing how to bypass restrictions or modify cache. '
    'Use "reply" for messages mentioning FPS unlockers or client settings without direct '
    'bypass instructions. Use "none" if the message is unrelated.'
)


class AISettings:
    """Typed accessors for the bypass classifier configuration (``ai_settings`` section)."""

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    @property
    def enabled(self) -> bool:
        """Explicit ``enabled`` value, or whether an API key is present when unset."""
        value = self.data.get("enabled")
        if value is None:
            return self.api_key is not None
        return bool(value)

    @property
    def api_key(self) -> str | None:
        """API key from ``OPENAI_API_KEY``; never read from the YAML file."""
        return os.getenv("OPENAI_API_KEY") or None

    @property
    def base_url(self) -> str | None:
        val = self.data.get("base_url")
        return str(val) if val else None

    @property
    def model_name(self) -> str:
        return str(self.data.get("model_name") or "gpt-4o-mini")

    @property
    def confidence_threshold(self) -> float:
        return float(self.data.get("confidence_threshold") or 0.7)

    @property
    def system_prompt(self) -> str:
        return str(self.data.get("system_prompt") or DEFAULT_CLASSIFIER_PROMPT)

    @property
    def temperature(self) -> float:
        value = self.data.get("temperature")
        return 0.1 if value is None else float(value)

    @property
    def max_tokens(self) -> int:
        return int(self.data.get("max_tokens") or 50)
