"""
Tag cog: pre-written help messages.

Commands
- /tag name [reply] [mention]: post a tag in the current channel
- /taglist: list every tag (ephemeral)
- /sendtags: post every tag (staff only)

The TagStore is created once at startup and passed in by ``orchard.main``.
"""

from typing import Iterable, List

import discord
from discord import Option
from discord.ext import commands

from orchard.tags.tag_store import TagStore
from orchard.ui.tag_embed import build_tag_embeds, build_tag_list_embed
from orchard.util import discord_utils
from orchard.util.logger import get_logger

logger = get_logger("tag_cog")

# How many recent messages /tag reply:True looks through
REPLY_SEARCH_LIMIT = 5


async def tag_name_autocomplete(ctx: discord.AutocompleteContext) -> List[str]:
    """Suggest tag ids starting with what the user typed so far."""
    cog = ctx.cog
    if cog is None:
        return []
    return cog.tag_store.search(ctx.value or "")


class TagCog(commands.Cog):
    """Cog containing the tag commands."""

    def __init__(self, discord_bot_instance, tag_store: TagStore, staff_role_ids: Iterable[int] = ()):
        self.discord_bot_instance = discord_bot_instance
        self.tag_store = tag_store
        self.staff_role_ids = list(staff_role_ids)
        logger.info("Tag cog loaded with %d tag(s)", len(tag_store))

    async def find_reply_target(self, application_context: discord.ApplicationContext) -> discord.Message | None:
        """Return the most recent non-bot message posted before the command."""
        invoked_at = application_context.interaction.created_at
        async for candidate in application_context.channel.history(limit=REPLY_SEARCH_LIMIT):
            if not candidate.author.bot and candidate.created_at < invoked_at:
                return candidate
        return None

    @commands.slash_command(name="tag", description="Sends a pre-written help message in the current channel")
    async def tag(
        self,
        ctx: discord.ApplicationContext,
        name: Option(str, "The tag name", autocomplete=tag_name_autocomplete),  # type: ignore
        reply: Option(bool, "Reply to the most recent message", required=False, default=False),  # type: ignore
        mention: Option(discord.User, "User to mention", required=False, default=None),  # type: ignore
    ) -> None:
        """Send a tag, optionally as a reply to the latest message and mentioning a user."""
        if ctx.channel is None or not ctx.channel.can_send():
            await ctx.respond("This channel is not sendable.", ephemeral=True)
            return

        tag = self.tag_store.get((name or "").strip())
        if tag is None:
            listing = "".join(f"\n- {tag_id}" for tag_id in self.tag_store.ids)
            await ctx.respond(f"No tags exist with this name. List of tags:{listing}", ephemeral=True)
            return

        payload = {"embeds": build_tag_embeds(tag)}
        if mention is not None:
            payload["content"] = mention.mention

        await ctx.defer(ephemeral=True)

        if not reply:
            await ctx.channel.send(**payload)
            await ctx.send_followup("Tag sent successfully!", ephemeral=True)
            return

        try:
            target = await self.find_reply_target(ctx)
            if target is not None:
                await target.reply(**payload)
                await ctx.send_followup(f"Tag sent as a reply to {target.author.name}'s message.", ephemeral=True)
            else:
                await ctx.channel.send(**payload)
                await ctx.send_followup(
                    "Couldn't find a recent message to reply to. Tag sent as a normal message.", ephemeral=True
                )
        except discord.HTTPException as exc:
            logger.error(f"Error replying to message: {exc}")
            await ctx.channel.send(**payload)
            await ctx.send_followup("Error while trying to reply. Tag sent as a normal message.", ephemeral=True)

    @commands.slash_command(name="taglist", description="Returns a list of existing tags.")
    async def taglist(self, ctx: discord.ApplicationContext) -> None:
        await ctx.respond(embed=build_tag_list_embed(self.tag_store), ephemeral=True)

    @commands.slash_command(
        name="sendtags",
        description="Sends every tag",
        default_member_permissions=discord.Permissions(manage_messages=True),
    )
    async def sendtags(self, ctx: discord.ApplicationContext) -> None:
        """Post every tag in the current channel."""
        if not discord_utils.is_staff(ctx, self.staff_role_ids):
            await ctx.respond("You do not have permission to use this command.", ephemeral=True)
            return
        if ctx.channel is None or not ctx.channel.can_send():
            await ctx.respond("Cannot send messages in this channel.", ephemeral=True)
            return

        await ctx.defer(ephemeral=True)
        for tag in self.tag_store:
            await ctx.channel.send(embeds=build_tag_embeds(tag))
        await ctx.send_followup(f"Sent {len(self.tag_store)} tag(s).", ephemeral=True)


def setup(discord_bot_instance, tag_store: TagStore, staff_role_ids: Iterable[int] = ()) -> None:
    """Register the TagCog with the bot."""
    discord_bot_instance.add_cog(TagCog(discord_bot_instance, tag_store, staff_role_ids))
