"""
Examine cog: the "Analyze AppleBlox config" message command.

Right-clicking a message that carries an AppleBlox diagnostic ZIP runs the
bundle analyzer and replies with a report embed, dpaste link buttons and the
merged configuration as a JSON attachment.

Failure policy
- A missing ZIP or channel is reported in the reply and nothing else runs.
- Download and extraction failures abort the analysis with an error reply.
- Everything else (risk list, pastes, attachment) degrades to a note in
  the report.
"""

import discord
from discord.ext import commands

from orchard.configuration.app_configuration import ExamineSettings, app_config
from orchard.examine import pipeline
from orchard.examine.report_renderer import render_report
from orchard.ui.examine_embed import (
    build_failure_message,
    build_link_view,
    build_report_embed,
    build_report_file,
)
from orchard.util.logger import get_logger

logger = get_logger("examine_cog")


class ExamineCog(commands.Cog):
    """Cog hosting the diagnostic bundle analyzer command."""

    def __init__(self, discord_bot_instance, settings: ExamineSettings | None = None):
        """
        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        settings:
            Analyzer settings; defaults to the ``examine`` section of the app config.
        """
        self.discord_bot_instance = discord_bot_instance
        self.settings = settings or app_config.examine
        logger.info("Examine cog loaded")

    @discord.message_command(
        name="Analyze AppleBlox config",
        contexts={discord.InteractionContextType.guild},
    )
    async def analyze_config(self, application_context: discord.ApplicationContext, message: discord.Message) -> None:
        """Analyze the first ZIP attached to the target message."""
        await application_context.defer()
        requester = getattr(application_context.author, "id", "unknown")

        if application_context.channel is None:
            await application_context.send_followup("Error: Could not access channel information.")
            return

        attachment = pipeline.find_bundle_attachment(message)
        if attachment is None:
            await application_context.send_followup("No .zip file found in the message.")
            return

        bundle_name = attachment.filename or "download.zip"
        logger.info("[EXAMINE] %s requested analysis of %s", requester, bundle_name)

        try:
            bundle_bytes = await pipeline.download_bundle(attachment)
            report = await pipeline.examine_bundle(bundle_bytes, bundle_name, self.settings)
        except Exception as exc:
            logger.error("[EXAMINE] Error processing ZIP file %s: %s", bundle_name, exc, exc_info=True)
            await application_context.send_followup(build_failure_message(exc))
            return

        rendered = render_report(
            report,
            max_errors=self.settings.max_displayed_errors,
            max_error_length=self.settings.max_error_length,
        )

        reply = {"embed": build_report_embed(rendered)}
        view = build_link_view(rendered)
        if view is not None:
            reply["view"] = view
        report_file = build_report_file(rendered)
        if report_file is not None:
            reply["file"] = report_file

        await application_context.send_followup(**reply)
        logger.info(
            "[EXAMINE] Sent report for %s: %d error(s), %d risky flag(s)",
            bundle_name,
            len(report.log_errors),
            len(report.risky_flags),
        )


def setup(discord_bot_instance) -> None:
    """Register the ExamineCog with the bot."""
    discord_bot_instance.add_cog(ExamineCog(discord_bot_instance))
