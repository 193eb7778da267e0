"""Tag definitions loaded from the tag YAML file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True, slots=True)
class TagEmbed:
    color: str
    title: str
    description: str
    image: str | None = None
    thumbnail: str | None = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TagEmbed:
        return cls(
            color=data["color"],
            title=data["title"],
            description=data["description"],
            image=data.get("image"),
            thumbnail=data.get("thumbnail"),
        )


@dataclass(frozen=True, slots=True)
class Tag:
    """A pre-written help message made of one or more embeds."""

    id: str
    embeds: List[TagEmbed] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.embeds[0].title if self.embeds else ""
