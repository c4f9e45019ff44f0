"""
User-facing interfaces.

- **anek_picker.py**: Discord select menu for list requests.
- **console.py**: prompt_toolkit developer console running next to the bot.
"""
