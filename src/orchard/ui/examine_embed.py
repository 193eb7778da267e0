"""
Discord presentation of a rendered bundle analysis.

The report becomes one embed (title, subtitle and sections in the
description), an optional view with dpaste link buttons, and an optional
JSON file attachment.
"""

import io

import discord

from orchard.examine.report_renderer import RenderedReport
from orchard.ui.theme import ThemeColors

EMBED_DESCRIPTION_LIMIT = 4096


def build_report_embed(rendered: RenderedReport) -> discord.Embed:
    """Create the analysis embed from rendered report sections."""
    parts = [rendered.subtitle]
    parts.extend(section.as_markdown() for section in rendered.sections)
    description = "\n\n".join(parts)
    if len(description) > EMBED_DESCRIPTION_LIMIT:
        description = description[: EMBED_DESCRIPTION_LIMIT - 3] + "..."

    return discord.Embed(
        title=rendered.title,
        description=description,
        color=ThemeColors.WARNING if rendered.has_risky_flags else ThemeColors.PRIMARY,
    )


def build_link_view(rendered: RenderedReport) -> discord.ui.View | None:
    """Create a view with one link button per uploaded paste, or ``None`` when there are none.

    Must be called from a running event loop.
    """
    if not rendered.links:
        return None
    view = discord.ui.View(timeout=None)
    for link in rendered.links:
        view.add_item(discord.ui.Button(label=link.label, url=link.url, style=discord.ButtonStyle.link))
    return view


def build_report_file(rendered: RenderedReport) -> discord.File | None:
    """Wrap the merged configuration attachment in a discord File."""
    attachment = rendered.attachment
    if attachment is None:
        return None
    return discord.File(
        io.BytesIO(attachment.data),
        filename=attachment.filename,
        description=attachment.description,
    )


def build_failure_message(error: Exception) -> str:
    return f"❌ Error processing ZIP file: {str(error) or 'An unknown error occurred.'}"
