# app.py

import asyncio
import io
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List

from pydantic import ValidationError
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)
from telegram.request import HTTPXRequest

from config import Settings
from domain.dtos import Palette, SearchHit
from domain.errors import InvalidColorFormat
from services.color_analyzer import ColorAnalyzer
from services.image_utils import bytes_to_cv2
from services.product_repository import ProductRepository
from services.product_search import ProductSearch
from services.query_parser import USAGE, parse_search_args

log = logging.getLogger("app")

MAX_REPLY_HITS = 10


def format_hits(hits: List[SearchHit]) -> str:
    if not hits:
        return "Nothing matches these colors. Try a higher tol= value."
    lines = []
    for h in hits[:MAX_REPLY_HITS]:
        p = h.product
        price = f"{p.price_cents / 100:.2f} {p.currency}"
        lines.append(f"{h.score:.2f}  {p.title} ({p.category or '-'}, {price})")
    if len(hits) > MAX_REPLY_HITS:
        lines.append(f"... and {len(hits) - MAX_REPLY_HITS} more")
    return "\n".join(lines)


class BotApp:
    """Composition root. Wires services and Telegram handlers."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.repo = ProductRepository(settings.db_url)
        self.colors = ColorAnalyzer(k=settings.palette_k, max_samples=settings.max_samples,
                                    max_width=settings.max_width)
        self.pool = ThreadPoolExecutor(max_workers=min(4, os.cpu_count() or 2))
        self.search = ProductSearch(self.repo, settings)

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_html(
            "<b>Hi!</b> Send me a few colors and I will find products in matching shades.\n"
            "You can also send a photo and I will search with its palette.\n\n"
            "Commands: /search, /help, /stats"
        )

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_text(USAGE)

    async def stats(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        counts = self.repo.count_by_category()
        formatted = "\n".join(f"{cat}: {n}" for cat, n in counts.items()) or "empty"
        await update.message.reply_text(f"Products in catalog:\n{formatted}")

    async def on_search(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        try:
            request = parse_search_args(context.args or [])
        except (ValidationError, ValueError) as e:
            log.info("Rejected search %r: %s", context.args, e)
            await message.reply_text(USAGE)
            return

        swatches = [(s.hex, s.weight) for s in request.palette]
        try:
            hits = await asyncio.get_running_loop().run_in_executor(
                self.pool, self.search.search, swatches, request.tolerance, request.category
            )
        except InvalidColorFormat:
            await message.reply_text("None of those colors look like #RRGGBB.\n\n" + USAGE)
            return
        except Exception:
            log.exception("Search failed")
            await message.reply_text("Search failed. Please try again later.")
            return
        await message.reply_text(format_hits(hits))

    def palette_from_bytes(self, img_bytes: bytes) -> Palette:
        return self.colors.extract_from_image(bytes_to_cv2(img_bytes))

    async def on_photo(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        if not message or not message.photo:
            return
        photo = message.photo[-1]
        file = await context.bot.get_file(photo.file_id)

        bio = io.BytesIO()
        await file.download_to_memory(out=bio)
        img_bytes = bio.getvalue()

        # Run heavy tasks off the event loop
        loop = asyncio.get_running_loop()
        try:
            palette = await loop.run_in_executor(self.pool, self.palette_from_bytes, img_bytes)
            hits = await loop.run_in_executor(self.pool, self.search.search_palette, palette)
        except Exception:
            log.exception("Photo search failed")
            await message.reply_text("Could not read colors from this photo. Try another one.")
            return
        await message.reply_text(format_hits(hits))

    def build_application(self) -> Application:
        request = HTTPXRequest(
            connect_timeout=20.0,
            read_timeout=40.0,
            write_timeout=20.0,
            pool_timeout=10.0,
            connection_pool_size=8,
        )

        app = (
            Application.builder()
            .token(self.settings.bot_token)
            .request(request)
            .concurrent_updates(True)
            .build()
        )
        app.add_handler(CommandHandler("start", self.start))
        app.add_handler(CommandHandler("help", self.help))
        app.add_handler(CommandHandler("stats", self.stats))
        app.add_handler(CommandHandler("search", self.on_search))
        app.add_handler(MessageHandler(filters.PHOTO, self.on_photo))
        return app


def main() -> None:
    settings = Settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if not settings.bot_token:
        raise SystemExit("BOT_TOKEN is not set")
    bot = BotApp(settings)
    app = bot.build_application()
    log.info("Bot started")
    app.run_polling(close_loop=False)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
