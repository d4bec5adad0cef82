"""Daylog Telegram Bot."""

import logging

from telegram import Update, Bot
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    filters,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .adapters.file_state import StateIOError
from .config import Config, load_config
from .core.views import format_today_view
from .telegram_handlers import (
    start_handler,
    help_handler,
    today_handler,
    add_handler,
    detail_handler,
    done_handler,
    carry_handler,
    save_handler,
    open_controller,
    send_markdown,
)

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to daylog.conf"
        )

    app = Application.builder().token(config.telegram_bot_token).build()
    auth_filter = AuthFilter(config.telegram_allowed_users)

    commands = {
        "start": start_handler,
        "help": help_handler,
        "today": today_handler,
        "add": add_handler,
        "detail": detail_handler,
        "done": done_handler,
        "carry": carry_handler,
        "save": save_handler,
    }
    for name, handler in commands.items():
        app.add_handler(CommandHandler(name, handler, filters=auth_filter))

    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in daylog.conf"
        )

    if config.telegram_allowed_users:
        app.add_handler(
            MessageHandler(~auth_filter & filters.ALL, unauthorized_handler)
        )

    return app


def _parse_time(value: str) -> tuple[int, int]:
    hour, minute = map(int, value.split(":"))
    return hour, minute


def setup_scheduler(app: Application, config: Config | None = None) -> AsyncIOScheduler:
    """Set up the scheduled autosave and reminder."""
    if config is None:
        config = load_config()

    scheduler = AsyncIOScheduler(timezone=config.timezone or "Asia/Tokyo")

    if config.telegram_autosave_time:
        try:
            hour, minute = _parse_time(config.telegram_autosave_time)
            scheduler.add_job(
                autosave,
                CronTrigger(hour=hour, minute=minute),
                id="autosave",
            )
            logger.info(f"Scheduled autosave at {hour:02d}:{minute:02d}")
        except ValueError:
            logger.warning(f"Invalid autosave time format: {config.telegram_autosave_time}")

    if config.telegram_reminder_time and config.telegram_allowed_users:
        try:
            hour, minute = _parse_time(config.telegram_reminder_time)
            scheduler.add_job(
                send_open_tasks_reminder,
                CronTrigger(hour=hour, minute=minute),
                args=[app.bot, config.telegram_allowed_users],
                id="open_tasks_reminder",
            )
            logger.info(f"Scheduled open-tasks reminder at {hour:02d}:{minute:02d}")
        except ValueError:
            logger.warning(f"Invalid reminder time format: {config.telegram_reminder_time}")

    return scheduler


async def autosave():
    """Run carry-forward and save at the end of the day."""
    try:
        controller = open_controller()
        controller.save()
        logger.info("Autosave complete")
    except StateIOError as e:
        logger.error(f"Autosave failed: {e}")


async def send_open_tasks_reminder(bot: Bot, user_ids: list[int]):
    """Remind users of today's unfinished tasks, if any."""
    try:
        controller = open_controller()
    except StateIOError as e:
        logger.error(f"Reminder skipped, state unavailable: {e}")
        return

    view = controller.today_view()
    if not view.today:
        logger.info("No open tasks today, skipping reminder")
        return

    text = format_today_view(view) + "\n\nUse /done or /carry before the day ends."
    for user_id in user_ids:
        try:
            await send_markdown(bot, text, chat_id=user_id)
        except Exception as e:
            logger.error(f"Failed to send reminder to user {user_id}: {e}")


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    app = create_application(config)
    scheduler = setup_scheduler(app, config)

    async def post_init(application: Application) -> None:
        """Start scheduler after event loop is running."""
        scheduler.start()
        logger.info("Scheduler started")

    app.post_init = post_init

    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting Daylog Telegram bot...")

    app.run_polling(allowed_updates=Update.ALL_TYPES)
