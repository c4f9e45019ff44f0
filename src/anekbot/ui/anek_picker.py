"""
Select-menu view presenting a list request's results.

The view keeps the request-scoped id to text mapping for the lifetime of the
menu; choosing an option posts the full text in the channel.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import discord

from anekbot.datatypes.content_datatypes import QueryResult
from anekbot.util.format_utils import clip_message, option_label
from anekbot.util.logger import get_logger

logger = get_logger("anek_picker")

PICKER_TIMEOUT_SECONDS = 120


def build_select_options(results: Sequence[QueryResult]) -> List[discord.SelectOption]:
    """Turn query results into select options keyed by their result id."""
    return [discord.SelectOption(label=option_label(result.text), value=result.result_id) for result in results]


class AnekSelect(discord.ui.Select):
    """Dropdown listing the sampled items."""

    def __init__(self, results: Sequence[QueryResult]):
        super().__init__(
            placeholder="Pick an anek to post",
            min_values=1,
            max_values=1,
            options=build_select_options(results),
        )

    async def callback(self, interaction: discord.Interaction) -> None:  # pragma: no cover - requires Discord runtime
        view: AnekPickerView = self.view  # type: ignore[assignment]
        text = view.text_for(self.values[0])
        if text is None:
            await interaction.response.send_message("That anek is no longer available.", ephemeral=True)
            return
        await interaction.response.send_message(clip_message(text))
        view.stop()


class AnekPickerView(discord.ui.View):
    """Ephemeral picker shown in reply to ``/aneks``."""

    def __init__(self, results: Sequence[QueryResult], *, timeout_seconds: int = PICKER_TIMEOUT_SECONDS):
        super().__init__(timeout=timeout_seconds)
        self._texts: Dict[str, str] = {result.result_id: result.text for result in results}
        self.add_item(AnekSelect(results))

    def text_for(self, result_id: str) -> Optional[str]:
        return self._texts.get(result_id)

    async def on_timeout(self) -> None:  # pragma: no cover - relies on Discord timers
        self.disable_all_items()
        message = self.message
        if message is not None:
            try:
                await message.edit(view=self)
            except discord.HTTPException:
                logger.debug("[ANEK PICKER] Could not disable expired picker")
