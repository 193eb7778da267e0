"""Tests for the "Analyze AppleBlox config" message command."""

import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from orchard.bot.cogs import examine_cmds
from orchard.configuration.app_configuration import ExamineSettings
from orchard.datatypes.analysis_datatypes import AnalysisReport, DebugInfo, ReportAttachment
from orchard.examine import pipeline
from orchard.examine.errors import ExtractionError


def make_ctx(channel=True):
    return SimpleNamespace(
        author=SimpleNamespace(id=1),
        channel=SimpleNamespace(id=2) if channel else None,
        defer=AsyncMock(),
        send_followup=AsyncMock(),
    )


def make_message(*filenames):
    return SimpleNamespace(
        attachments=[SimpleNamespace(filename=name, url=f"https://cdn.invalid/{name}") for name in filenames]
    )


def make_report(**overrides):
    values = dict(
        bundle_name="bundle.zip",
        completed_at=datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc),
        debug_info=DebugInfo(os_name="macOS"),
        log_errors=["a.log: error"],
        merged_config={"a": {}},
        profiles=None,
        risky_flags=[],
        risk_check_performed=True,
    )
    values.update(overrides)
    return AnalysisReport(**values)


@pytest.fixture
def cog():
    return examine_cmds.ExamineCog(SimpleNamespace(), settings=ExamineSettings({}))


async def run(cog, ctx, message):
    await examine_cmds.ExamineCog.analyze_config.callback(cog, ctx, message)


def test_setup_registers_cog():
    captured = {}
    examine_cmds.setup(SimpleNamespace(add_cog=lambda cog: captured.setdefault("cog", cog)))
    assert isinstance(captured["cog"], examine_cmds.ExamineCog)


@pytest.mark.asyncio
async def test_missing_zip(cog):
    ctx = make_ctx()

    await run(cog, ctx, make_message("photo.png"))

    ctx.defer.assert_awaited_once()
    ctx.send_followup.assert_awaited_once_with("No .zip file found in the message.")


@pytest.mark.asyncio
async def test_missing_channel(cog):
    ctx = make_ctx(channel=False)

    await run(cog, ctx, make_message("bundle.zip"))

    ctx.send_followup.assert_awaited_once_with("Error: Could not access channel information.")


@pytest.mark.asyncio
async def test_successful_analysis_sends_embed_view_and_file(cog, monkeypatch):
    monkeypatch.setattr(pipeline, "download_bundle", AsyncMock(return_value=b"zip"))
    examine = AsyncMock(
        return_value=make_report(
            config_attachment=ReportAttachment("c.json", "Merged", b"{}"),
            config_paste_url="https://dpaste.com/1",
        )
    )
    monkeypatch.setattr(pipeline, "examine_bundle", examine)
    ctx = make_ctx()

    await run(cog, ctx, make_message("notes.txt", "bundle.zip"))

    assert examine.await_args.args[:2] == (b"zip", "bundle.zip")
    kwargs = ctx.send_followup.await_args.kwargs
    assert isinstance(kwargs["embed"], discord.Embed)
    assert kwargs["embed"].title == "Config analysis"
    assert "a.log: error" in kwargs["embed"].description
    assert isinstance(kwargs["view"], discord.ui.View)
    assert kwargs["file"].filename == "c.json"


@pytest.mark.asyncio
async def test_report_without_links_or_file(cog, monkeypatch):
    monkeypatch.setattr(pipeline, "download_bundle", AsyncMock(return_value=b"zip"))
    monkeypatch.setattr(pipeline, "examine_bundle", AsyncMock(return_value=make_report(merged_config=None)))
    ctx = make_ctx()

    await run(cog, ctx, make_message("bundle.zip"))

    kwargs = ctx.send_followup.await_args.kwargs
    assert set(kwargs) == {"embed"}


@pytest.mark.asyncio
async def test_extraction_failure_is_reported(cog, monkeypatch):
    monkeypatch.setattr(pipeline, "download_bundle", AsyncMock(return_value=b"zip"))
    monkeypatch.setattr(
        pipeline, "examine_bundle", AsyncMock(side_effect=ExtractionError("The file is not a valid ZIP archive"))
    )
    ctx = make_ctx()

    await run(cog, ctx, make_message("bundle.zip"))

    ctx.send_followup.assert_awaited_once_with(
        "❌ Error processing ZIP file: The file is not a valid ZIP archive"
    )
