# ui/app_shell.py
from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future

import flet as ft
from sqlalchemy.engine import Engine

from core.errors import TaskAppError
from core.settings import NOTIFICATIONS, UI
from services.notifications import LocalNotificationCenter
from services.task_store import TaskStore
from storage.config import load_config, update_config
from storage.db import session_factory
from ui.dialogs import toast
from ui.pages.task_list import TaskListPage
from ui.presenter import TaskListPresenter

logger = logging.getLogger("taskapp.ui")


class AppShell:
    def __init__(self, page: ft.Page, engine: Engine):
        self.page = page
        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START

        config = load_config()
        factory = session_factory(engine)
        self.notifications = LocalNotificationCenter(factory)
        self.store = TaskStore(factory, notifier=self.notifications)
        self.presenter = TaskListPresenter(
            self.store,
            self.notifications,
            on_error=self.show_error,
            on_query_committed=lambda text: update_config(last_query=text),
            notifications_enabled=NOTIFICATIONS.enabled and config.notifications_enabled,
        )
        self._task_list = TaskListPage(self, self.presenter, initial_query=config.last_query)
        self._delivery_task: Future | None = None

    def show_error(self, message: str):
        toast(self.page, message)

    # ---------- notifications ----------
    def _deliver_due(self):
        try:
            alerts = self.notifications.pop_due()
        except TaskAppError as exc:
            logger.warning("Notification delivery failed: %s", exc)
            return
        for alert in alerts:
            text = alert.title or "Task reminder"
            if alert.body:
                text = f"{text}: {alert.body}"
            toast(self.page, text)

    def _start_delivery(self):
        if not self.presenter.notifications_enabled:
            return

        async def _loop():
            while True:
                self._deliver_due()
                await asyncio.sleep(NOTIFICATIONS.poll_interval_sec)

        self._delivery_task = self.page.run_task(_loop)

    def _stop_delivery(self):
        if self._delivery_task:
            self._delivery_task.cancel()
        self._delivery_task = None

    # ---------- mounting ----------
    def mount(self):
        self.page.controls.clear()
        self.page.floating_action_button = self._task_list.fab
        self.page.add(self._task_list.view)
        self.page.on_disconnect = lambda e: self._stop_delivery()
        self._task_list.load()
        self._start_delivery()
