"""
discord_utils.py
================

Low-level Discord helpers shared by the cogs: permission and staff-role
checks, and error-tolerant message operations. Nothing here
keeps state.
"""

from typing import Iterable, Union

import discord

from orchard.util.logger import get_logger

logger = get_logger("discord_utils")


def has_permissions(application_context: discord.ApplicationContext, **required_permissions) -> bool:
    """
    Check if the command issuer has all specified permissions in the guild.

    Args:
        application_context (discord.ApplicationContext): The command context.
        **required_permissions: Permission flags to check.

    Returns:
        bool: True if all permissions are present, False otherwise.
    """
    if not isinstance(application_context.author, discord.Member):
        return False
    return all(
        getattr(application_context.author.guild_permissions, permission_name, False)
        for permission_name in required_permissions
    )


def has_staff_role(member: Union[discord.User, discord.Member], staff_role_ids: Iterable[int]) -> bool:
    """Return True if ``member`` holds any of the configured staff roles."""
    if not isinstance(member, discord.Member):
        return False
    wanted = set(staff_role_ids)
    return any(role.id in wanted for role in member.roles)


def is_staff(application_context: discord.ApplicationContext, staff_role_ids: Iterable[int]) -> bool:
    """Allow members who can manage messages or hold a staff role."""
    return has_permissions(application_context, manage_messages=True) or has_staff_role(
        application_context.author, staff_role_ids
    )


async def safe_delete_message(message: discord.Message) -> bool:
    """
    Attempt to delete a Discord message, suppressing recoverable errors.

    Args:
        message (discord.Message): The message to delete.

    Returns:
        bool: True if deletion succeeded, False otherwise.
    """
    try:
        await message.delete()
        return True
    except discord.NotFound:
        return False
    except discord.Forbidden:
        logger.warning(f"No permission to delete message {message.id}")
    except discord.HTTPException as exc:
        logger.error(f"Error deleting message {message.id}: {exc}")
    return False


async def fetch_replied_message(message: discord.Message) -> discord.Message | None:
    """Fetch the message that ``message`` replies to, or None if there is none or it is gone."""
    reference = message.reference
    if reference is None or reference.message_id is None:
        return None
    try:
        return await message.channel.fetch_message(reference.message_id)
    except discord.HTTPException as exc:
        logger.warning(f"Could not fetch replied message {reference.message_id}: {exc}")
        return None
