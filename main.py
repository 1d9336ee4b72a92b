# taskapp/main.py
import logging
import os, sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
import flet as ft

from core.errors import StorageUnavailable
from core.logging_setup import setup_logging
from core.settings import APP_NAME, BACKUP, DB_PATH, UI, ensure_data_dirs
from storage.backup import ensure_daily_backup
from storage.db import open_database
from ui.app_shell import AppShell

logger = logging.getLogger("taskapp")


def main(page: ft.Page):
    page.title = UI.app_title
    page.theme_mode = UI.theme_mode
    page.theme = ft.Theme(color_scheme_seed=UI.color_scheme_seed)
    page.appbar = ft.AppBar(title=ft.Text(APP_NAME), center_title=False)
    page.window.min_width = UI.window_min_width
    page.window.min_height = UI.window_min_height

    try:
        engine = open_database(DB_PATH)
    except StorageUnavailable as exc:
        logger.critical("Startup aborted: %s", exc)
        page.add(ft.Text(f"Cannot open the task database.\n{exc}", color=UI.theme.danger))
        page.update()
        return

    shell = AppShell(page, engine)
    shell.mount()


def run():
    ensure_data_dirs()
    setup_logging()
    if BACKUP.enabled:
        try:
            ensure_daily_backup(DB_PATH, BACKUP.directory, keep_days=BACKUP.keep_days)
        except OSError as exc:
            logger.warning("Daily backup skipped: %s", exc)
    ft.app(target=main)


if __name__ == "__main__":
    run()
