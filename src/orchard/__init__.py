"""
Orchard - AppleBlox Community Discord Bot

Orchard runs the AppleBlox support server: it examines the diagnostic bundles
users upload, keeps FastFlag bypass instructions out of the channels, and
serves pre-written help messages.

Core Components:

- **Bundle Analyzer**: Extracts uploaded ZIP bundles into isolated staging
  directories, scans logs for errors and system information, merges JSON
  configuration and profiles, and flags profile entries found on the
  community risky-flag list
- **Report Rendering**: Presents the analysis as an embed with dpaste links
  and the merged configuration attached
- **Bypass Detection**: Keyword matching backed by an OpenAI-compatible
  classifier, with deletion logging and public warnings
- **Tags**: YAML-defined help messages with autocomplete

Usage:
    from orchard.main import main
    main()  # Starts the bot
"""
