import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from coordsuite import main
from coordsuite.converter import Hemisphere
from coordsuite.session import Session


def make_update(text=None, data=None):
    update = MagicMock()
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.callback_query.data = data
    update.callback_query.answer = AsyncMock()
    update.callback_query.message.reply_text = AsyncMock()
    update.callback_query.message.reply_document = AsyncMock()
    return update


def make_context(*args, session=None):
    user_data = {"session": session or Session(utm_zone=30, hemisphere=Hemisphere.NORTH)}
    return SimpleNamespace(user_data=user_data, args=list(args))


def replies(update):
    return [c.args[0] for c in update.message.reply_text.await_args_list]


def test_start():
    update = make_update()
    asyncio.run(main.start(update, make_context()))
    assert "/zone" in replies(update)[0]


def test_text_is_converted():
    update = make_update("41.65 -0.87\n41.66 -0.88")
    context = make_context()
    asyncio.run(main.handle_text(update, context))

    text = replies(update)[0]
    assert "Lat/Lon to UTM" in text
    assert "zone 30 North" in text
    assert "https://www.openstreetmap.org/#map=" in text
    assert update.message.reply_text.await_args.kwargs["reply_markup"] is not None
    assert len(context.user_data["session"].coords_utm) == 2


def test_text_without_numbers():
    update = make_update("hello")
    asyncio.run(main.handle_text(update, make_context()))
    assert "No coordinate pairs" in replies(update)[0]


def test_text_that_fails_to_convert():
    update = make_update("500000 4600000\n50 4600000")
    asyncio.run(main.handle_text(update, make_context()))
    assert "Conversion failed" in replies(update)[0]


def test_unexpected_error_is_reported():
    session = MagicMock()
    session.load_text.side_effect = RuntimeError("boom")
    update = make_update("41.65 -0.87")
    asyncio.run(main.handle_text(update, make_context(session=session)))
    assert "internal error" in replies(update)[0]


def test_zone_command():
    context = make_context("31")
    asyncio.run(main.handle_text(make_update("675870 4613360"), context))

    update = make_update()
    asyncio.run(main.set_zone(update, context))
    assert "zone 31" in replies(update)[0]


def test_zone_command_usage():
    update = make_update()
    asyncio.run(main.set_zone(update, make_context("abc")))
    assert replies(update)[0].startswith("Usage")

    update = make_update()
    asyncio.run(main.set_zone(update, make_context()))
    assert replies(update)[0].startswith("Usage")


def test_zone_command_in_latlon_mode():
    context = make_context("12")
    asyncio.run(main.handle_text(make_update("41.65 -0.87"), context))

    update = make_update()
    asyncio.run(main.set_zone(update, context))
    assert "follows the points" in replies(update)[0]


def test_hemisphere_command():
    context = make_context("S")
    asyncio.run(main.handle_text(make_update("675870 4613360"), context))

    update = make_update()
    asyncio.run(main.set_hemisphere(update, context))
    assert "zone 30 South" in replies(update)[0]


def test_mode_command():
    update = make_update()
    asyncio.run(main.set_mode(update, make_context("bogus")))
    assert replies(update)[0].startswith("Usage")

    update = make_update()
    asyncio.run(main.set_mode(update, make_context("utm")))
    assert "UTM to Lat/Lon" in replies(update)[0]


def test_copy_command():
    context = make_context()
    asyncio.run(main.handle_text(make_update("41.65 -0.87"), context))

    update = make_update()
    asyncio.run(main.copy_values(update, context))
    latlon, utm = replies(update)
    assert latlon == "41.65\t-0.87"
    assert len(utm.split("\t")) == 2


def test_export_kml():
    context = make_context()
    asyncio.run(main.handle_text(make_update("41.65 -0.87"), context))

    update = make_update(data="kml")
    asyncio.run(main.export(update, context))

    kwargs = update.callback_query.message.reply_document.await_args.kwargs
    assert kwargs["filename"] == "coordinates.kml"
    assert kwargs["document"].startswith(b"<?xml")
    assert b"<coordinates>-0.87,41.65,0</coordinates>" in kwargs["document"]


def test_export_csv_utm():
    context = make_context()
    asyncio.run(main.handle_text(make_update("41.65 -0.87"), context))

    update = make_update(data="csv_utm")
    asyncio.run(main.export(update, context))

    kwargs = update.callback_query.message.reply_document.await_args.kwargs
    assert kwargs["filename"] == "coordinates_utm.csv"
    assert kwargs["document"].startswith(b"Easting\tNorthing\n")


def test_export_without_points():
    update = make_update(data="csv_latlon")
    asyncio.run(main.export(update, make_context()))
    update.callback_query.message.reply_document.assert_not_awaited()
    update.callback_query.message.reply_text.assert_awaited_once()


def test_build_application_registers_handlers():
    app = main.build_application("123456:TEST-TOKEN")
    assert len(app.handlers[0]) == 7


def test_hemisphere_command_rejects_unknown_word():
    context = make_context("sideways")
    asyncio.run(main.handle_text(make_update("675870 4613360"), context))

    update = make_update()
    asyncio.run(main.set_hemisphere(update, context))
    assert replies(update)[0].startswith("Usage")
    assert context.user_data["session"].hemisphere is Hemisphere.NORTH


def test_importing_package_main_does_not_start_the_bot(monkeypatch):
    import importlib
    import sys

    started = []
    monkeypatch.setattr(main, "main", lambda: started.append(True))
    sys.modules.pop("coordsuite.__main__", None)
    importlib.import_module("coordsuite.__main__")
    assert started == []
