"""
General commands cog: latency check and a user-app smoke test.
"""

import datetime

import discord
from discord.ext import commands

from orchard.util.logger import get_logger

logger = get_logger("general_commands")


class GeneralCog(commands.Cog):
    """Cog for small utility commands."""

    def __init__(self, discord_bot_instance):
        self.discord_bot_instance = discord_bot_instance

    @commands.slash_command(name="ping", description="Replies with the bot's latency")
    async def ping(self, application_context: discord.ApplicationContext) -> None:
        """Reply with the time elapsed since the interaction was created."""
        created_at = application_context.interaction.created_at
        elapsed = datetime.datetime.now(datetime.timezone.utc) - created_at
        elapsed_ms = abs(int(elapsed.total_seconds() * 1000))
        await application_context.respond(f"Reply in `{elapsed_ms}ms`.")
        logger.debug(f"Ping answered in {elapsed_ms}ms for {application_context.author}")

    @commands.slash_command(
        name="user_command",
        description="A user app test command",
        integration_types={
            discord.IntegrationType.guild_install,
            discord.IntegrationType.user_install,
        },
        contexts={
            discord.InteractionContextType.guild,
            discord.InteractionContextType.bot_dm,
            discord.InteractionContextType.private_channel,
        },
    )
    async def user_command(self, application_context: discord.ApplicationContext) -> None:
        await application_context.respond("Hello world!", ephemeral=True)


def setup(discord_bot_instance) -> None:
    """Register the general cog with the bot."""
    discord_bot_instance.add_cog(GeneralCog(discord_bot_instance))
