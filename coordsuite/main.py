import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    ApplicationBuilder, CommandHandler,
    MessageHandler, CallbackQueryHandler,
    ContextTypes, filters
)

from coordsuite.config import LOG_FILE, TOKEN
from coordsuite.export import (
    kml_document, latlon_csv, latlon_tsv, points_table, utm_csv, utm_tsv
)
from coordsuite.parsers import ConversionMode
from coordsuite.session import Outcome, Session
from coordsuite.viewport import map_url

logger = logging.getLogger(__name__)

# Telegram messages are capped at 4096 characters
MAX_TABLE_ROWS = 50

MODES = {
    "utm": ConversionMode.UTM_TO_LATLON,
    "latlon": ConversionMode.LATLON_TO_UTM,
}

EXPORTS = {
    "kml": ("coordinates.kml", lambda s: kml_document(s.coords_geo)),
    "csv_latlon": ("coordinates_latlon.csv", lambda s: latlon_csv(s.coords_geo)),
    "csv_utm": ("coordinates_utm.csv", lambda s: utm_csv(s.coords_utm)),
}

USAGE = (
    "📍 Paste coordinates, one point per line.\n\n"
    "Lat/Lon:   41.65 -0.87\n"
    "UTM:       675870 4613360\n\n"
    "/zone 30 - UTM zone of pasted UTM points\n"
    "/hemisphere N|S - hemisphere of pasted UTM points\n"
    "/mode utm|latlon - which side is the source\n"
    "/copy - tab separated values"
)


def get_session(context):
    return context.user_data.setdefault("session", Session())


def render(session):
    rows = len(session.coords_geo)
    table = points_table(session.coords_geo[:MAX_TABLE_ROWS], session.coords_utm[:MAX_TABLE_ROWS])
    if rows > MAX_TABLE_ROWS:
        table += f"\n… {rows - MAX_TABLE_ROWS} more"

    return (
        f"{session.conversion_mode} · zone {session.utm_zone} {session.hemisphere}\n\n"
        f"{table}\n\n"
        f"🗺 {map_url(session.viewport())}"
    )


def export_keyboard():
    return InlineKeyboardMarkup([[
        InlineKeyboardButton("KML", callback_data="kml"),
        InlineKeyboardButton("CSV Lat/Lon", callback_data="csv_latlon"),
        InlineKeyboardButton("CSV UTM", callback_data="csv_utm"),
    ]])


async def reply_outcome(update, session, outcome):
    if outcome is Outcome.FAILED:
        await update.message.reply_text(
            "❌ Conversion failed, nothing was changed.\n"
            "Check the UTM zone and hemisphere of the points."
        )
        return

    if len(session.coords_geo) == 0:
        await update.message.reply_text("❌ No coordinates yet, paste some first.")
        return

    await update.message.reply_text(render(session), reply_markup=export_keyboard())


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(USAGE)


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE):
    try:
        session = get_session(context)
        outcome = session.load_text(update.message.text)
        if outcome is Outcome.EMPTY:
            await update.message.reply_text("❌ No coordinate pairs found.")
            return
        await reply_outcome(update, session, outcome)

    except Exception as e:
        logging.exception("Processing error: %s", str(e))
        await update.message.reply_text(
            "⚠️ An internal error occurred while processing your message."
        )


async def set_zone(update: Update, context: ContextTypes.DEFAULT_TYPE):
    session = get_session(context)
    try:
        outcome = session.set_zone(context.args[0])
    except (IndexError, ValueError):
        await update.message.reply_text("Usage: /zone <1-60>")
        return

    if outcome is None:
        await update.message.reply_text("The zone follows the points in Lat/Lon to UTM mode.")
        return
    await reply_outcome(update, session, outcome)


async def set_hemisphere(update: Update, context: ContextTypes.DEFAULT_TYPE):
    session = get_session(context)
    try:
        outcome = session.set_hemisphere(context.args[0])
    except (IndexError, ValueError):
        await update.message.reply_text("Usage: /hemisphere N|S")
        return

    if outcome is None:
        await update.message.reply_text("The hemisphere follows the points in Lat/Lon to UTM mode.")
        return
    await reply_outcome(update, session, outcome)


async def set_mode(update: Update, context: ContextTypes.DEFAULT_TYPE):
    session = get_session(context)
    mode = MODES.get(context.args[0].lower()) if context.args else None
    if mode is None:
        await update.message.reply_text("Usage: /mode utm|latlon")
        return

    outcome = session.set_mode(mode)
    if outcome is Outcome.EMPTY:
        await update.message.reply_text(f"Mode set to {mode}.")
        return
    await reply_outcome(update, session, outcome)


async def copy_values(update: Update, context: ContextTypes.DEFAULT_TYPE):
    session = get_session(context)
    if len(session.coords_geo) == 0:
        await update.message.reply_text("❌ No coordinates yet.")
        return

    await update.message.reply_text(latlon_tsv(session.coords_geo))
    await update.message.reply_text(utm_tsv(session.coords_utm))


async def export(update: Update, context: ContextTypes.DEFAULT_TYPE):
    q = update.callback_query
    await q.answer()

    session = get_session(context)
    if q.data not in EXPORTS or len(session.coords_geo) == 0:
        await q.message.reply_text("❌ Nothing to export.")
        return

    filename, build = EXPORTS[q.data]
    await q.message.reply_document(document=build(session), filename=filename)
    logger.info("Exported %d point(s) to %s", len(session.coords_geo), filename)


def setup_logging():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOG_FILE),
        ],
    )


def build_application(token):
    app = ApplicationBuilder().token(token).build()
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("zone", set_zone))
    app.add_handler(CommandHandler("hemisphere", set_hemisphere))
    app.add_handler(CommandHandler("mode", set_mode))
    app.add_handler(CommandHandler("copy", copy_values))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text))
    app.add_handler(CallbackQueryHandler(export, pattern="^(kml|csv_latlon|csv_utm)$"))
    return app


def main():
    if not TOKEN or ":" not in TOKEN:
        raise RuntimeError("BOT_TOKEN is missing or invalid")

    setup_logging()
    app = build_application(TOKEN)

    logging.info("Bot started successfully")
    app.run_polling()


if __name__ == "__main__":
    main()
