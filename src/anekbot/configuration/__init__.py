"""
Configuration management for Anekbot.

- **app_configuration.py**: YAML loader for ``config/app_config.yml`` with
  shared-lock reads. Falls back to an empty mapping on missing or malformed files.
- **cache_settings.py**: Typed, validated accessors for the ``content_cache``
  section (sources, batch size, capacity, delays, throttle window).
"""
