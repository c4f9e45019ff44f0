"""
Shared helpers for Anekbot.

- **logger.py**: Session-wide logging with colored prompt_toolkit console output
  and a rotating log file under ``logs/``.
- **format_utils.py**: Clipping helpers that keep texts inside Discord's
  message and select-option length limits.
"""
