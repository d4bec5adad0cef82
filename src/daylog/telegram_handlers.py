"""Telegram command handlers."""

import logging

import telegramify_markdown
from telegram import Update
from telegram.ext import ContextTypes

from .adapters.file_state import StateIOError
from .app import TaskLogController
from .config import load_config
from .core.views import format_task_line, format_today_view

logger = logging.getLogger(__name__)

MAX_MESSAGE = 4000

HELP_TEXT = (
    "/today - Show today's tasks\n"
    "/add <title> - Add a task\n"
    "/detail <n> <text> - Set a task's detail\n"
    "/done <n> - Mark task n done\n"
    "/carry <n> - Carry task n to the next business day\n"
    "/save - Carry forward and save\n"
    "/help - Show all commands"
)


def open_controller() -> TaskLogController:
    """Controller for today in the configured timezone, loaded from the state file."""
    controller = TaskLogController.from_config(load_config())
    controller.load()
    return controller


async def send_markdown(bot_or_msg, text: str, *, chat_id: int | None = None):
    """Send a Markdown task listing as MarkdownV2, split to fit Telegram's limit.

    bot_or_msg: a Bot (pass chat_id) or an Update.message (calls reply_text).
    """
    converted = telegramify_markdown.markdownify(text)
    for i in range(0, len(converted), MAX_MESSAGE):
        chunk = converted[i : i + MAX_MESSAGE]
        if chat_id is not None:
            await bot_or_msg.send_message(chat_id=chat_id, text=chunk, parse_mode="MarkdownV2")
        else:
            await bot_or_msg.reply_text(chunk, parse_mode="MarkdownV2")


async def _reply_error(update: Update, e: Exception) -> None:
    logger.error(f"Command failed: {e}")
    await update.message.reply_text(f"Error: {e}")


def _parse_index(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hey! I'm Daylog, your daily task tracker.\n\n"
        "Commands:\n" + HELP_TEXT
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text("Daylog Commands\n\n" + HELP_TEXT)


async def today_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /today command - show the Today view."""
    try:
        controller = open_controller()
    except StateIOError as e:
        await _reply_error(update, e)
        return
    await send_markdown(update.message, format_today_view(controller.today_view()))


# ============== Task Actions ==============


async def add_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /add <title>."""
    title = " ".join(context.args or [])
    try:
        controller = open_controller()
        task = controller.add_task(title)
        if task is None:
            await update.message.reply_text("Usage: /add <title>")
            return
        controller.persist()
    except StateIOError as e:
        await _reply_error(update, e)
        return

    index = len(controller.current_bucket.tasks) - 1
    await update.message.reply_text(f"Added {format_task_line(index, task)}")


async def _index_action(update: Update, context: ContextTypes.DEFAULT_TYPE, action: str):
    index = _parse_index(context.args or [])
    if index is None:
        await update.message.reply_text(f"Usage: /{action} <n>")
        return

    try:
        controller = open_controller()
        if action == "done":
            task = controller.mark_done(index)
        elif action == "carry":
            task = controller.mark_carry(index)
        else:
            task = controller.edit_detail(index, " ".join(context.args[1:]))
        controller.persist()
    except (IndexError, StateIOError) as e:
        await _reply_error(update, e)
        return

    await update.message.reply_text(format_task_line(index, task))


async def detail_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /detail <n> <text>."""
    await _index_action(update, context, "detail")


async def done_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /done <n>."""
    await _index_action(update, context, "done")


async def carry_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /carry <n>."""
    await _index_action(update, context, "carry")


async def save_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /save - carry forward and write the state file."""
    try:
        controller = open_controller()
        controller.save()
    except StateIOError as e:
        await _reply_error(update, e)
        return
    await update.message.reply_text(f"Saved to {controller.state.current_path}")
