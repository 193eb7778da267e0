"""
Embeds posted by the bypass detector.

This module provides the public warning shown in the channel and the
report sent to the moderation log channel when a message is deleted.
"""

import discord

from orchard.moderation.bypass_detector import BypassDecision
from orchard.ui.theme import ThemeColors

WARNING_TITLE = "Removal of most fast flags"

WARNING_BODY = (
    "Roblox has implemented a whitelist system that restricts which fast flags can be modified. "
    "As a result, many engine settings (including frame rate caps, lighting technology, and others) "
    "are no longer configurable. Custom flag profiles may also be affected. Please do not create "
    "GitHub issues or Discord support threads about this limitation. It's a Roblox-side restriction "
    "that cannot be bypassed.\n\n"
    "Please also note that some methods of bypassing those restrictions exist, but they **will get you banned** "
    "(not instantly, but in the next banwave)."
)

REMOVAL_NOTICE = (
    " **The message has been removed because it contained information about bypassing these "
    "restrictions, which is a punishable offense by Roblox.**"
)

FIELD_VALUE_LIMIT = 1024


def build_warning_embed(*, removed: bool, image_url: str | None = None) -> discord.Embed:
    """Create the public FastFlag warning; ``removed`` selects the deletion wording."""
    embed = discord.Embed(
        title=WARNING_TITLE,
        description=WARNING_BODY + (REMOVAL_NOTICE if removed else ""),
        color=ThemeColors.ERROR if removed else ThemeColors.WARNING,
    )
    if image_url:
        embed.set_image(url=image_url)
    return embed


def clip_field(value: str) -> str:
    if len(value) > FIELD_VALUE_LIMIT:
        return value[: FIELD_VALUE_LIMIT - 3] + "..."
    return value


def build_deletion_log_embed(
    message: discord.Message,
    decision: BypassDecision,
    replied_to: discord.Message | None = None,
    replied_to_unavailable: bool = False,
) -> discord.Embed:
    """
    Create the moderation-log report for a deleted bypass message.

    Args:
        message: The message about to be deleted
        decision: Verdict that triggered the deletion
        replied_to: The message it replied to, when it could be fetched
        replied_to_unavailable: True when the message was a reply but the original could not be fetched

    Returns:
        discord.Embed: Report with author, location, detection method and content
    """
    author = message.author
    embed = discord.Embed(title="🚫 Message Deleted - Bypass Content", color=ThemeColors.ERROR)
    embed.add_field(name="Author", value=f"{author.mention} ({author})", inline=True)
    embed.add_field(name="Author ID", value=str(author.id), inline=True)
    embed.add_field(name="Channel", value=f"<#{message.channel.id}>", inline=True)
    embed.add_field(name="Message ID", value=str(message.id), inline=True)
    embed.add_field(name="Detection Method", value=decision.detection_method, inline=True)
    embed.add_field(name="Timestamp", value=f"<t:{int(message.created_at.timestamp())}:F>", inline=True)

    if decision.confidence is not None:
        embed.add_field(name="AI Confidence", value=f"{decision.confidence * 100:.1f}%", inline=True)

    embed.add_field(name="Content", value=clip_field(message.content) or "*No text content*", inline=False)

    if replied_to is not None:
        embed.add_field(
            name="Replying To",
            value=f"{replied_to.author.mention} ({replied_to.author})",
            inline=False,
        )
    elif replied_to_unavailable:
        embed.add_field(name="Replying To", value="Unable to fetch replied message", inline=False)

    if message.attachments:
        urls = "\n".join(attachment.url for attachment in message.attachments)
        embed.add_field(name="Attachments", value=clip_field(urls), inline=False)

    return embed
