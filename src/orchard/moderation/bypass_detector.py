"""Detection of messages about bypassing the Roblox FastFlag whitelist.

Keyword matching runs first. The OpenAI-compatible classifier is only
consulted when no keyword matched, and its verdict only counts above the
configured confidence threshold.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import openai
from openai import AsyncOpenAI

from orchard.configuration.ai_settings import AISettings
from orchard.util.logger import get_logger

logger = get_logger("bypass_detector")


class BypassAction(Enum):
    DELETE = "delete"
    REPLY = "reply"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class KeywordVerdict:
    should_delete: bool = False
    should_reply: bool = False

    @property
    def matched(self) -> bool:
        return self.should_delete or self.should_reply


@dataclass(frozen=True, slots=True)
class AIClassification:
    should_delete: bool
    should_reply: bool
    confidence: float


@dataclass(frozen=True, slots=True)
class BypassDecision:
    """Final verdict for one message.

    Attributes:
        action: What to do with the message
        detection_method: ``"keyword"`` or ``"AI"``
        confidence: Classifier confidence when the AI was consulted
    """

    action: BypassAction
    detection_method: str = "keyword"
    confidence: float | None = None


def contains_bypass_keywords(content: str, keywords: Iterable[str]) -> bool:
    lowered = content.lower()
    return any(keyword in lowered for keyword in keywords)


def check_keywords(content: str, delete_keywords: Iterable[str], reply_keywords: Iterable[str]) -> KeywordVerdict:
    return KeywordVerdict(
        should_delete=contains_bypass_keywords(content, delete_keywords),
        should_reply=contains_bypass_keywords(content, reply_keywords),
    )


def parse_classification(raw: str | None) -> AIClassification | None:
    """Parse the classifier's ``{"action": ..., "confidence": ...}`` reply."""
    if not raw:
        return None
    try:
        payload = json.loads(raw.strip())
    except json.JSONDecodeError as exc:
        logger.warning("[BYPASS] Classifier reply is not JSON: %s", exc)
        return None
    if not isinstance(payload, dict):
        logger.warning("[BYPASS] Classifier reply is not an object: %r", payload)
        return None

    action = str(payload.get("action", "none")).lower()
    try:
        confidence = float(payload.get("confidence") or 0)
    except (TypeError, ValueError):
        confidence = 0.0
    return AIClassification(
        should_delete=action == BypassAction.DELETE.value,
        should_reply=action == BypassAction.REPLY.value,
        confidence=confidence,
    )


class BypassClassifier:
    """Ask an OpenAI-compatible chat model whether a message is bypass content."""

    def __init__(self, settings: AISettings) -> None:
        self._settings = settings
        self._client: AsyncOpenAI | None = None

    @property
    def available(self) -> bool:
        return self._settings.enabled and bool(self._settings.api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._settings.api_key, base_url=self._settings.base_url)
            logger.info(
                "[BYPASS] Initialized classifier with base_url=%s, model=%s",
                self._settings.base_url,
                self._settings.model_name,
            )
        return self._client

    async def classify(self, content: str) -> AIClassification | None:
        """Return the model's verdict, or ``None`` when unavailable or on any failure."""
        if not self.available:
            return None

        try:
            response = await self._get_client().chat.completions.create(
                model=self._settings.model_name,
                messages=[
                    {"role": "system", "content": self._settings.system_prompt},
                    {"role": "user", "content": content},
                ],
                temperature=self._settings.temperature,
                max_tokens=self._settings.max_tokens,
            )
        except openai.OpenAIError as exc:
            logger.error("[BYPASS] AI classification error: %s", exc)
            return None

        if not response.choices:
            return None
        return parse_classification(response.choices[0].message.content)


def decide_action(
    keyword_verdict: KeywordVerdict,
    ai_result: AIClassification | None,
    confidence_threshold: float = 0.7,
) -> BypassDecision:
    """Combine keyword and AI verdicts; deletion wins over a reply."""
    confident = ai_result is not None and ai_result.confidence > confidence_threshold
    should_delete = keyword_verdict.should_delete or (confident and ai_result.should_delete)
    should_reply = keyword_verdict.should_reply or (confident and ai_result.should_reply)

    if should_delete:
        action = BypassAction.DELETE
    elif should_reply:
        action = BypassAction.REPLY
    else:
        action = BypassAction.NONE

    method = "keyword" if keyword_verdict.matched else "AI"
    return BypassDecision(
        action=action,
        detection_method=method,
        confidence=ai_result.confidence if ai_result is not None else None,
    )
