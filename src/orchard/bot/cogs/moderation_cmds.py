"""
Moderation cog: bulk cleanup of FastFlag bypass discussions.

/purge-bypass scans the most recent messages of the current channel and
deletes those containing any bypass keyword. It is limited to members who
can manage messages or hold a configured staff role.
"""

from typing import Iterable, List

import discord
from discord import Option
from discord.ext import commands

from orchard.configuration.app_configuration import BypassSettings, app_config
from orchard.moderation.bypass_detector import contains_bypass_keywords
from orchard.util import discord_utils
from orchard.util.logger import get_logger

logger = get_logger("moderation_cog")

MAX_PURGE_SCAN = 100


class ModerationCog(commands.Cog):
    """Cog containing the bypass purge command."""

    def __init__(
        self,
        discord_bot_instance,
        bypass_settings: BypassSettings | None = None,
        staff_role_ids: Iterable[int] | None = None,
    ):
        self.discord_bot_instance = discord_bot_instance
        self.bypass_settings = bypass_settings or app_config.bypass_detection
        self.staff_role_ids = list(staff_role_ids if staff_role_ids is not None else app_config.staff_role_ids)
        logger.info("Moderation cog loaded")

    @commands.slash_command(
        name="purge-bypass",
        description="Removes all messages containing FPS unlock/bypass keywords in this channel",
        default_member_permissions=discord.Permissions(manage_messages=True),
    )
    async def purge_bypass(
        self,
        ctx: discord.ApplicationContext,
        limit: Option(int, "Number of messages to scan (max 100)", min_value=1, max_value=MAX_PURGE_SCAN, required=False, default=MAX_PURGE_SCAN),  # type: ignore
    ) -> None:
        """Delete recent messages that mention bypass keywords."""
        await ctx.defer(ephemeral=True)

        if not discord_utils.is_staff(ctx, self.staff_role_ids):
            await ctx.send_followup("You do not have permission to use this command.", ephemeral=True)
            return
        if ctx.channel is None or not ctx.channel.can_send():
            await ctx.send_followup("Cannot access this channel.", ephemeral=True)
            return

        keywords = self.bypass_settings.purge_keywords
        try:
            matching: List[discord.Message] = [
                message
                async for message in ctx.channel.history(limit=limit or MAX_PURGE_SCAN)
                if contains_bypass_keywords(message.content or "", keywords)
            ]
        except discord.HTTPException as exc:
            logger.error(f"Error scanning messages in {ctx.channel}: {exc}")
            await ctx.send_followup(f"Error scanning messages: {exc}", ephemeral=True)
            return

        if not matching:
            await ctx.send_followup("No messages found containing bypass keywords.", ephemeral=True)
            return

        deleted_count = 0
        for message in matching:
            if await discord_utils.safe_delete_message(message):
                deleted_count += 1

        logger.info(f"{ctx.author} purged {deleted_count} bypass message(s) in {ctx.channel}")
        await ctx.send_followup(
            f"Successfully removed {deleted_count} message(s) containing FPS unlock/bypass keywords.",
            ephemeral=True,
        )


def setup(discord_bot_instance) -> None:
    """Register the ModerationCog with the bot."""
    discord_bot_instance.add_cog(ModerationCog(discord_bot_instance))
