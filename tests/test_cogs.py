from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from anekbot.cog.commands import anek_cmds
from anekbot.cog.listener import events_listener
from anekbot.datatypes.content_datatypes import QueryResult
from anekbot.ui.anek_picker import AnekPickerView, build_select_options


def _ctx(user_id: int = 1) -> MagicMock:
    ctx = MagicMock()
    ctx.author = SimpleNamespace(id=user_id)
    ctx.respond = AsyncMock()
    ctx.defer = AsyncMock()
    ctx.delete = AsyncMock()
    return ctx


def _command_cog(service) -> anek_cmds.AnekCommandsCog:
    return anek_cmds.AnekCommandsCog(MagicMock(), service)


@pytest.mark.asyncio
async def test_anek_replies_with_sampled_text() -> None:
    service = MagicMock()
    service.on_single_request.return_value = "a horse walks into a bar"
    cog = _command_cog(service)
    ctx = _ctx(user_id=77)

    await anek_cmds.AnekCommandsCog.anek.callback(cog, ctx)

    service.on_single_request.assert_called_once_with(77)
    ctx.respond.assert_awaited_once_with("a horse walks into a bar")


@pytest.mark.asyncio
async def test_anek_without_content_sends_nothing() -> None:
    service = MagicMock()
    service.on_single_request.return_value = None
    cog = _command_cog(service)
    ctx = _ctx()

    await anek_cmds.AnekCommandsCog.anek.callback(cog, ctx)

    ctx.respond.assert_not_awaited()
    ctx.defer.assert_awaited_once_with(ephemeral=True)
    ctx.delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_anek_clips_long_text() -> None:
    service = MagicMock()
    service.on_single_request.return_value = "x" * 5000
    ctx = _ctx()

    await anek_cmds.AnekCommandsCog.anek.callback(_command_cog(service), ctx)

    sent = ctx.respond.await_args.args[0]
    assert len(sent) == 2000


@pytest.mark.asyncio
async def test_aneks_shows_picker_view() -> None:
    service = MagicMock()
    service.on_list_request.return_value = [QueryResult("0", "first"), QueryResult("1", "second")]
    ctx = _ctx(user_id=5)

    await anek_cmds.AnekCommandsCog.aneks.callback(_command_cog(service), ctx)

    service.on_list_request.assert_called_once_with(5)
    view = ctx.respond.await_args.kwargs["view"]
    assert isinstance(view, AnekPickerView)
    assert view.text_for("1") == "second"
    assert view.text_for("9") is None
    assert ctx.respond.await_args.kwargs["ephemeral"] is True


@pytest.mark.asyncio
async def test_aneks_without_results_sends_nothing() -> None:
    service = MagicMock()
    service.on_list_request.return_value = []
    ctx = _ctx()

    await anek_cmds.AnekCommandsCog.aneks.callback(_command_cog(service), ctx)

    ctx.respond.assert_not_awaited()
    ctx.delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_start_and_help_use_default_texts() -> None:
    cog = _command_cog(MagicMock())
    ctx = _ctx()

    await anek_cmds.AnekCommandsCog.start.callback(cog, ctx)
    await anek_cmds.AnekCommandsCog.help.callback(cog, ctx)

    sent = [call.args[0] for call in ctx.respond.await_args_list]
    assert "/anek" in sent[0]
    assert "/aneks" in sent[1]


def test_select_options_use_result_ids_and_short_labels() -> None:
    options = build_select_options([QueryResult("0", "line one\nline two"), QueryResult("1", "y" * 300)])

    assert [option.value for option in options] == ["0", "1"]
    assert options[0].label == "line one line two"
    assert len(options[1].label) == 100


@pytest.mark.asyncio
async def test_on_message_advances_configured_source() -> None:
    service = MagicMock()
    service.state_for.return_value = object()
    source_client = MagicMock()
    source_client.position_of.return_value = 321
    cog = events_listener.EventsListenerCog(MagicMock(), service, source_client)
    message = SimpleNamespace(channel=SimpleNamespace(id=555))

    await cog.on_message(message)

    service.record_new_message.assert_called_once_with(555, 321)


@pytest.mark.asyncio
async def test_on_message_ignores_other_channels() -> None:
    service = MagicMock()
    service.state_for.return_value = None
    cog = events_listener.EventsListenerCog(MagicMock(), service, MagicMock())

    await cog.on_message(SimpleNamespace(channel=SimpleNamespace(id=1)))

    service.record_new_message.assert_not_called()


@pytest.mark.asyncio
async def test_on_ready_starts_cache_service() -> None:
    bot = MagicMock()
    bot.user = SimpleNamespace(id=9)
    bot.change_presence = AsyncMock()
    service = MagicMock()
    cog = events_listener.EventsListenerCog(bot, service, MagicMock())

    await cog.on_ready()

    bot.change_presence.assert_awaited_once()
    service.start.assert_called_once()


@pytest.mark.asyncio
async def test_on_ready_waits_for_user_info() -> None:
    bot = MagicMock()
    bot.user = None
    service = MagicMock()
    cog = events_listener.EventsListenerCog(bot, service, MagicMock())

    await cog.on_ready()

    service.start.assert_not_called()
