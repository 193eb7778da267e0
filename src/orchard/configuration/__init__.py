"""
Configuration management for Orchard.

- **app_configuration.py**: YAML configuration loader for global settings
  (bundle analyzer endpoints and limits, bypass detection keywords, staff
  roles, tag file location). Falls back gracefully on missing or malformed
  config files.

- **ai_settings.py**: Typed accessors for the OpenAI-compatible bypass
  classifier (model, endpoint, confidence threshold, prompt).
"""
