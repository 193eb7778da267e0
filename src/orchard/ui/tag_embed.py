"""Embed conversion for tags."""

from typing import List

import discord

from orchard.datatypes.tag_datatypes import Tag
from orchard.tags.tag_store import TagStore
from orchard.ui.theme import ThemeColors, parse_theme_color


def build_tag_embeds(tag: Tag) -> List[discord.Embed]:
    embeds: List[discord.Embed] = []
    for tag_embed in tag.embeds:
        embed = discord.Embed(
            title=tag_embed.title,
            description=tag_embed.description,
            color=parse_theme_color(tag_embed.color),
        )
        if tag_embed.image:
            embed.set_image(url=tag_embed.image)
        if tag_embed.thumbnail:
            embed.set_thumbnail(url=tag_embed.thumbnail)
        embeds.append(embed)
    return embeds


def build_tag_list_embed(tag_store: TagStore) -> discord.Embed:
    content = "\n".join(f"`{tag.id}`: {tag.title}" for tag in tag_store)
    return discord.Embed(
        title="List of tags",
        description=content or "*No tags configured.*",
        color=ThemeColors.PRIMARY,
    )
