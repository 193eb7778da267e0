"""Message listener Cog for Orchard.

Every guild message from a human goes through the bypass detector. Messages
that explain how to bypass the Roblox FastFlag whitelist are reported to
the log channel, deleted, and answered with a public warning; messages that
only mention FPS unlockers or client settings get a softer warning reply.
"""

import discord
from discord.ext import commands

from orchard.configuration.app_configuration import BypassSettings, app_config
from orchard.moderation.bypass_detector import (
    BypassAction,
    BypassClassifier,
    BypassDecision,
    check_keywords,
    decide_action,
)
from orchard.ui.bypass_embed import build_deletion_log_embed, build_warning_embed
from orchard.util import discord_utils
from orchard.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for scanning new messages for bypass content."""

    def __init__(
        self,
        discord_bot_instance,
        settings: BypassSettings | None = None,
        classifier: BypassClassifier | None = None,
        confidence_threshold: float | None = None,
    ):
        """
        Initialize the message listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        settings:
            Bypass detection settings; defaults to the app config section.
        classifier:
            AI classifier; defaults to one built from the app config AI settings.
        confidence_threshold:
            Minimum AI confidence for a verdict to count.
        """
        self.bot = discord_bot_instance
        self.settings = settings or app_config.bypass_detection
        ai_settings = app_config.ai_settings
        self.classifier = classifier or BypassClassifier(ai_settings)
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None else ai_settings.confidence_threshold
        )
        logger.info("Message listener cog loaded")

    def _should_scan(self, message: discord.Message) -> bool:
        if not self.settings.enabled or message.guild is None:
            return False
        if message.author.bot:
            return False
        return len(message.content or "") >= self.settings.min_message_length

    async def evaluate(self, content: str) -> BypassDecision:
        """Run keyword matching, then the AI classifier when no keyword matched."""
        keyword_verdict = check_keywords(content, self.settings.delete_keywords, self.settings.reply_keywords)
        ai_result = None
        if not keyword_verdict.matched:
            ai_result = await self.classifier.classify(content)
        return decide_action(keyword_verdict, ai_result, self.confidence_threshold)

    async def log_deleted_message(
        self,
        message: discord.Message,
        decision: BypassDecision,
        replied_to: discord.Message | None,
    ) -> None:
        """Send a report of the message to the configured log channel, if any."""
        channel_id = self.settings.log_channel_id
        if channel_id is None:
            return

        try:
            log_channel = self.bot.get_channel(channel_id) or await self.bot.fetch_channel(channel_id)
        except discord.HTTPException as exc:
            logger.error(f"[BYPASS] Could not fetch bypass log channel {channel_id}: {exc}")
            return
        if not isinstance(log_channel, discord.abc.Messageable):
            logger.error("[BYPASS] Bypass log channel not found or not a text channel")
            return

        embed = build_deletion_log_embed(
            message,
            decision,
            replied_to=replied_to,
            replied_to_unavailable=replied_to is None and message.reference is not None,
        )
        try:
            await log_channel.send(embed=embed)
        except discord.HTTPException as exc:
            logger.error(f"[BYPASS] Failed to log deleted message: {exc}")

    async def handle_delete(self, message: discord.Message, decision: BypassDecision) -> None:
        replied_to = await discord_utils.fetch_replied_message(message)
        mentions = message.author.mention
        if replied_to is not None and not replied_to.author.bot:
            mentions += f" {replied_to.author.mention}"

        await self.log_deleted_message(message, decision, replied_to)

        await message.delete()
        logger.info(
            f"[BYPASS] Deleted message from {message.author} ({message.author.id}) containing bypass content"
        )

        warning = build_warning_embed(removed=True, image_url=self.settings.warning_image_url)
        await message.channel.send(content=mentions, embed=warning)

    async def handle_reply(self, message: discord.Message) -> None:
        warning = build_warning_embed(removed=False, image_url=self.settings.warning_image_url)
        await message.reply(embed=warning)
        logger.info(f"[BYPASS] Replied to message from {message.author} ({message.author.id}) with bypass warning")

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message):
        """
        Scan a new message and act on bypass content.

        Parameters
        ----------
        message:
            The Discord message that was created.
        """
        if not self._should_scan(message):
            return

        decision = await self.evaluate(message.content)
        if decision.action is BypassAction.NONE:
            return

        confidence = f" (confidence: {decision.confidence:.2f})" if decision.confidence is not None else ""
        logger.info(f"[BYPASS] Detected bypass content from {message.author} via {decision.detection_method}{confidence}")

        try:
            if decision.action is BypassAction.DELETE:
                await self.handle_delete(message, decision)
            else:
                await self.handle_reply(message)
        except discord.HTTPException as exc:
            logger.error(f"[BYPASS] Failed to handle bypass message from {message.author}: {exc}")


def setup(discord_bot_instance):
    """Register the MessageListenerCog with the bot."""
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance))
