"""
Diagnostic bundle analyzer behind the "Analyze AppleBlox config" command.

- **archive_stager.py**: isolated per-run extraction directories
- **log_analyzer.py**: error lines and system information from ``.log`` files
- **config_merger.py**: merged JSON configuration and validated profiles
- **risky_flags.py**: risk list download and profile cross-check
- **paste_upload.py**: dpaste uploads for large JSON payloads
- **report_renderer.py**: ordered report sections
- **pipeline.py**: orchestration of the stages above
"""
