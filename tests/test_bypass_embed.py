"""Tests for the bypass warning and deletion log embeds."""

import datetime
from types import SimpleNamespace

from orchard.moderation.bypass_detector import BypassAction, BypassDecision
from orchard.ui.bypass_embed import (
    REMOVAL_NOTICE,
    WARNING_TITLE,
    build_deletion_log_embed,
    build_warning_embed,
    clip_field,
)
from orchard.ui.theme import ThemeColors


def make_message(content="bypass text", reference=None, attachments=()):
    return SimpleNamespace(
        author=SimpleNamespace(id=42, mention="<@42>"),
        channel=SimpleNamespace(id=7),
        id=1001,
        content=content,
        created_at=datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc),
        reference=reference,
        attachments=list(attachments),
    )


def fields_by_name(embed):
    return {field.name: field.value for field in embed.fields}


def test_warning_for_reply():
    embed = build_warning_embed(removed=False)
    assert embed.title == WARNING_TITLE
    assert REMOVAL_NOTICE not in embed.description
    assert embed.color == ThemeColors.WARNING


def test_warning_for_removal_with_image():
    embed = build_warning_embed(removed=True, image_url="https://img.invalid/w.png")
    assert embed.description.endswith(REMOVAL_NOTICE)
    assert embed.image.url == "https://img.invalid/w.png"
    assert embed.color == ThemeColors.ERROR


def test_deletion_log_keyword():
    embed = build_deletion_log_embed(make_message(), BypassDecision(BypassAction.DELETE, "keyword"))

    fields = fields_by_name(embed)
    assert fields["Author ID"] == "42"
    assert fields["Channel"] == "<#7>"
    assert fields["Message ID"] == "1001"
    assert fields["Detection Method"] == "keyword"
    assert fields["Content"] == "bypass text"
    assert "AI Confidence" not in fields
    assert "Replying To" not in fields


def test_deletion_log_ai_with_reply():
    replied_to = SimpleNamespace(author=SimpleNamespace(mention="<@9>"))

    embed = build_deletion_log_embed(
        make_message(attachments=[SimpleNamespace(url="https://cdn.invalid/a.png")]),
        BypassDecision(BypassAction.DELETE, "AI", confidence=0.875),
        replied_to=replied_to,
    )

    fields = fields_by_name(embed)
    assert fields["Detection Method"] == "AI"
    assert fields["AI Confidence"] == "87.5%"
    assert fields["Replying To"].startswith("<@9>")
    assert fields["Attachments"] == "https://cdn.invalid/a.png"


def test_deletion_log_unavailable_reply():
    embed = build_deletion_log_embed(
        make_message(), BypassDecision(BypassAction.DELETE), replied_to_unavailable=True
    )
    assert fields_by_name(embed)["Replying To"] == "Unable to fetch replied message"


def test_empty_content_placeholder():
    embed = build_deletion_log_embed(make_message(content=""), BypassDecision(BypassAction.DELETE))
    assert fields_by_name(embed)["Content"] == "*No text content*"


def test_clip_field():
    assert clip_field("a" * 10) == "a" * 10
    clipped = clip_field("a" * 2000)
    assert len(clipped) == 1024
    assert clipped.endswith("...")
