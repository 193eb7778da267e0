"""YAML-backed store of pre-written help messages ("tags").

The store is loaded once at startup by ``orchard.main`` and handed to the
cogs that need it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

import jsonschema
import yaml
from jsonschema import ValidationError

from orchard.datatypes.tag_datatypes import Tag, TagEmbed
from orchard.util.logger import get_logger

logger = get_logger("tag_store")

# Discord autocomplete accepts at most 25 choices
MAX_AUTOCOMPLETE_CHOICES = 25

TAGS_SCHEMA: dict = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "embeds"],
        "properties": {
            "id": {"type": "string", "minLength": 1},
            "embeds": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["color", "title", "description"],
                    "properties": {
                        "color": {"type": "string"},
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "image": {"type": "string"},
                        "thumbnail": {"type": "string"},
                    },
                },
            },
        },
    },
}


class TagStoreError(Exception):
    """The tag file is missing, unreadable or malformed."""


class TagStore:
    """Ordered, validated collection of tags."""

    def __init__(self, tags: List[Tag]) -> None:
        self._tags = list(tags)
        self._by_id = {tag.id: tag for tag in self._tags}

    @classmethod
    def from_data(cls, data: Any) -> TagStore:
        try:
            jsonschema.validate(instance=data, schema=TAGS_SCHEMA)
        except ValidationError as exc:
            raise TagStoreError(f"Invalid tag format found in tags file: {exc.message}") from exc

        tags = [
            Tag(id=item["id"], embeds=[TagEmbed.from_dict(embed) for embed in item["embeds"]])
            for item in data
        ]
        return cls(tags)

    @classmethod
    def from_file(cls, path: Path) -> TagStore:
        """Parse and validate a tag YAML file.

        Raises
        ------
        TagStoreError
            If the file cannot be read or does not contain a valid list of tags.
        """
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise TagStoreError(f"Failed to parse tags file: {exc}") from exc

        store = cls.from_data(data)
        logger.info("[TAGS] Loaded %d tag(s) from %s", len(store), path)
        return store

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self):
        return iter(self._tags)

    def get(self, tag_id: str) -> Tag | None:
        return self._by_id.get(tag_id)

    @property
    def ids(self) -> List[str]:
        return [tag.id for tag in self._tags]

    def search(self, prefix: str) -> List[str]:
        """Return tag ids starting with ``prefix`` (case-insensitive), capped for autocomplete."""
        lowered = prefix.lower()
        return [tag.id for tag in self._tags if tag.id.lower().startswith(lowered)][:MAX_AUTOCOMPLETE_CHOICES]
