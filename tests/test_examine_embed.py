"""Tests for the analysis embed, link view and attachment."""

import pytest

from orchard.datatypes.analysis_datatypes import ReportAttachment
from orchard.examine.errors import DownloadError
from orchard.examine.report_renderer import RenderedReport, ReportLink, ReportSection
from orchard.ui.examine_embed import (
    EMBED_DESCRIPTION_LIMIT,
    build_failure_message,
    build_link_view,
    build_report_embed,
    build_report_file,
)
from orchard.ui.theme import ThemeColors


def make_rendered(sections=None, links=None, attachment=None, has_risky_flags=False) -> RenderedReport:
    return RenderedReport(
        title="Config analysis",
        subtitle="*For file `b.zip`*",
        sections=sections or [ReportSection("✅ No Errors Found", ["*No errors detected in the logs.*"])],
        links=links or [],
        attachment=attachment,
        has_risky_flags=has_risky_flags,
    )


def test_embed_contains_sections():
    embed = build_report_embed(make_rendered())

    assert embed.title == "Config analysis"
    assert embed.description.startswith("*For file `b.zip`*")
    assert "### ✅ No Errors Found" in embed.description
    assert embed.color == ThemeColors.PRIMARY


def test_embed_uses_warning_color_for_risky_flags():
    embed = build_report_embed(
        make_rendered([ReportSection("❗ Risky Flags Detected", ["- `X`"])], has_risky_flags=True)
    )
    assert embed.color == ThemeColors.WARNING


def test_embed_description_is_clipped():
    embed = build_report_embed(make_rendered([ReportSection("Big", ["y" * 5000])]))
    assert len(embed.description) == EMBED_DESCRIPTION_LIMIT
    assert embed.description.endswith("...")


@pytest.mark.asyncio
async def test_link_view_has_one_button_per_link():
    view = build_link_view(
        make_rendered(links=[ReportLink("Open Overall Config (dpaste)", "https://dpaste.com/1")])
    )

    assert len(view.children) == 1
    assert view.children[0].url == "https://dpaste.com/1"
    assert view.children[0].label == "Open Overall Config (dpaste)"


def test_no_links_no_view():
    assert build_link_view(make_rendered()) is None


def test_report_file():
    report_file = build_report_file(
        make_rendered(attachment=ReportAttachment("merged.json", "Merged", b'{"a": 1}'))
    )
    assert report_file.filename == "merged.json"
    assert report_file.fp.read() == b'{"a": 1}'


def test_no_attachment_no_file():
    assert build_report_file(make_rendered()) is None


def test_failure_message():
    assert build_failure_message(DownloadError("Failed to download: 404")) == (
        "❌ Error processing ZIP file: Failed to download: 404"
    )
    assert build_failure_message(RuntimeError()) == "❌ Error processing ZIP file: An unknown error occurred."


def test_embed_color_ignores_section_headings():
    embed = build_report_embed(make_rendered([ReportSection("❗ Something Else", ["text"])]))
    assert embed.color == ThemeColors.PRIMARY
