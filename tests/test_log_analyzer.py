"""Tests for the log analyzer."""

from pathlib import Path

from orchard.datatypes.analysis_datatypes import DebugInfo
from orchard.examine.log_analyzer import (
    analyze_log_files,
    extract_block_value,
    extract_debug_info_from_log,
    extract_errors_from_log,
    extract_roblox_version,
    find_log_files,
)

SYSTEM_LOG = """\
[10:00:00] Starting AppleBlox
OS Info:
  Name: macOS
  Version: 14.5
  Architecture: arm64

CPU Info:
  Model: Apple M1 Pro
  Architecture: arm64
  Logical Threads: 10

Memory Info:
  Physical Total: 16 GB
  Physical Available: 5.2 GB

Application Info:
  Version: 0.8.6
  Application ID: js.appleblox

Neutralino Info:
  Version: 5.3.0

Found latest log file: /Users/me/Library/Logs/Roblox/0.650.0.6500512_20241101T101010Z_Player_A1B2C_last.log
"""


class TestExtractErrors:
    def test_timestamp_moves_into_prefix(self):
        assert extract_errors_from_log("[12:00] Error while loading", "a.log") == [
            "a.log [12:00]: Error while loading"
        ]

    def test_line_without_timestamp_uses_file_name(self):
        assert extract_errors_from_log("could not open socket", "b.log") == ["b.log: could not open socket"]

    def test_timestamp_whitespace_is_trimmed(self):
        assert extract_errors_from_log("[  09:15:01  ]   Exception: boom", "c.log") == [
            "c.log [09:15:01]: Exception: boom"
        ]

    def test_each_line_reported_once(self):
        errors = extract_errors_from_log("Error while reading: could not open file (error)", "d.log")
        assert len(errors) == 1

    def test_neutralino_error_code(self):
        content = '[1] {"code":"NE_FS_NOPATHE","message":"missing"}'
        assert extract_errors_from_log(content, "e.log") == ['e.log [1]: {"code":"NE_FS_NOPATHE","message":"missing"}']

    def test_cannot_perform(self):
        assert extract_errors_from_log("Cannot perform update", "f.log") == ["f.log: Cannot perform update"]

    def test_clean_and_blank_lines_are_ignored(self):
        content = "\n   \n[10:00] Launching app\nINFO ready\n"
        assert extract_errors_from_log(content, "g.log") == []

    def test_matching_is_case_insensitive(self):
        assert extract_errors_from_log("FAILURE in module", "h.log") == ["h.log: FAILURE in module"]

    def test_order_follows_lines(self):
        content = "error one\nfine\nerror two"
        assert extract_errors_from_log(content, "i.log") == ["i.log: error one", "i.log: error two"]


class TestDebugInfo:
    def test_extracts_every_block(self):
        info = extract_debug_info_from_log(SYSTEM_LOG)

        assert info.os_name == "macOS"
        assert info.os_version == "14.5"
        assert info.os_architecture == "arm64"
        assert info.cpu_model == "Apple M1 Pro"
        assert info.cpu_architecture == "arm64"
        assert info.cpu_threads == "10"
        assert info.ram_total == "16 GB"
        assert info.ram_available == "5.2 GB"
        assert info.app_version == "0.8.6"
        assert info.app_id == "js.appleblox"
        assert info.runtime_version == "5.3.0"
        assert info.roblox_version == "0.650.0.6500512"

    def test_version_labels_stay_inside_their_block(self):
        content = "Application Info:\n  Version: 1.2.3\n\nNeutralino Info:\n  Version: 9.9.9\n"
        assert extract_block_value("Application Info", "Version", content) == "1.2.3"
        assert extract_block_value("Neutralino Info", "Version", content) == "9.9.9"

    def test_missing_block_or_label(self):
        assert extract_block_value("OS Info", "Name", "nothing here") is None
        assert extract_block_value("OS Info", "Kernel", "OS Info:\n  Name: macOS\n") is None

    def test_roblox_version_from_launch_line(self):
        assert extract_roblox_version("Launching Roblox with Version: 0.640.1") == "0.640.1"

    def test_roblox_version_absent(self):
        assert extract_roblox_version("no roblox here") is None

    def test_empty_log_gives_empty_info(self):
        assert extract_debug_info_from_log("").is_empty()


class TestDebugInfoMerge:
    def test_later_values_win_and_missing_values_do_not_clobber(self):
        first = DebugInfo(os_name="macOS", os_version="13.0")
        first.merge(DebugInfo(os_version="14.5", app_version="0.8.6"))

        assert first.os_name == "macOS"
        assert first.os_version == "14.5"
        assert first.app_version == "0.8.6"


class TestAnalyzeLogFiles:
    def test_prefers_logs_folder_and_sorts_files(self, tmp_path: Path):
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "b.log").write_text("[2] error in b", encoding="utf-8")
        (logs / "a.log").write_text("[1] error in a", encoding="utf-8")
        (logs / "notes.txt").write_text("error ignored", encoding="utf-8")
        (tmp_path / "root.log").write_text("error at root", encoding="utf-8")

        _, errors = analyze_log_files(tmp_path)

        assert errors == ["a.log [1]: error in a", "b.log [2]: error in b"]

    def test_falls_back_to_root(self, tmp_path: Path):
        (tmp_path / "main.log").write_text("Error while starting", encoding="utf-8")

        assert [path.name for path in find_log_files(tmp_path)] == ["main.log"]
        _, errors = analyze_log_files(tmp_path)
        assert errors == ["main.log: Error while starting"]

    def test_missing_root_gives_nothing(self, tmp_path: Path):
        info, errors = analyze_log_files(tmp_path / "missing")
        assert errors == []
        assert info.is_empty()

    def test_debug_info_merges_across_files(self, tmp_path: Path):
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "1.log").write_text("OS Info:\n  Name: macOS\n  Version: 13.0\n", encoding="utf-8")
        (logs / "2.log").write_text(
            "OS Info:\n  Version: 14.5\n\nApplication Info:\n  Version: 0.8.6\n", encoding="utf-8"
        )

        info, _ = analyze_log_files(tmp_path)

        assert info.os_name == "macOS"
        assert info.os_version == "14.5"
        assert info.app_version == "0.8.6"

    def test_unreadable_file_becomes_system_error(self, tmp_path: Path):
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "broken.log").mkdir()
        (logs / "ok.log").write_text("error here", encoding="utf-8")

        _, errors = analyze_log_files(tmp_path)

        assert errors == ["System Error: Could not read log file broken.log", "ok.log: error here"]

    def test_invalid_utf8_is_replaced(self, tmp_path: Path):
        (tmp_path / "bin.log").write_bytes(b"error \xff\xfe here")

        _, errors = analyze_log_files(tmp_path)

        assert len(errors) == 1
        assert errors[0].startswith("bin.log: error ")

    def test_repeat_runs_are_identical(self, tmp_path: Path):
        (tmp_path / "x.log").write_text(SYSTEM_LOG + "\nerror: boom\n", encoding="utf-8")

        assert analyze_log_files(tmp_path) == analyze_log_files(tmp_path)

    def test_unlistable_logs_folder_gives_nothing(self, tmp_path: Path, monkeypatch):
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "a.log").write_text("error in a", encoding="utf-8")
        original_iterdir = Path.iterdir

        def iterdir(self):
            if self.name == "logs":
                raise PermissionError("denied")
            return original_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)

        info, errors = analyze_log_files(tmp_path)

        assert errors == []
        assert info.is_empty()
