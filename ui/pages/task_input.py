# taskapp/ui/pages/task_input.py
from __future__ import annotations

from datetime import date, datetime, time as dt_time
from typing import Callable

import flet as ft

from core.settings import UI
from models.task import Task
from ui.dialogs import close_alert_dialog, open_alert_dialog
from utils.datetime_utils import (
    combine_local,
    local_to_storage,
    parse_date_input,
    parse_time_input,
    to_local,
)


class TaskInputDialog:
    """Edit form for one task: title, category, contents and date."""

    def __init__(self, app, task: Task, on_save: Callable[[Task, dict], None]):
        self.app = app
        self.task = task
        self.on_save = on_save
        self.dialog: ft.AlertDialog | None = None

        local = to_local(task.date) or datetime.now().astimezone()

        self.title_tf = ft.TextField(label="Title", value=task.title, autofocus=True)
        self.category_tf = ft.TextField(label="Category", value=task.category)
        self.contents_tf = ft.TextField(
            label="Contents", value=task.contents, multiline=True, min_lines=3, max_lines=6
        )
        self.date_tf = ft.TextField(
            label="Date", value=local.strftime(UI.input_date_format), hint_text="dd.mm.yyyy", expand=True
        )
        self.time_tf = ft.TextField(
            label="Time", value=local.strftime(UI.input_time_format), hint_text="hh:mm", width=110
        )

        self.date_picker = ft.DatePicker(
            first_date=date(2000, 1, 1),
            last_date=date(2100, 12, 31),
            value=local.date(),
            on_change=lambda e: self._set_date(e.control.value),
        )
        self.time_picker = ft.TimePicker(
            value=dt_time(local.hour, local.minute),
            help_text="Select time",
            on_change=lambda e: self._set_time(e.control.value),
        )

    # ---------- pickers ----------
    def _set_date(self, value):
        if isinstance(value, (date, datetime)):
            self.date_tf.value = value.strftime(UI.input_date_format)
            self.app.page.update()

    def _set_time(self, value):
        if isinstance(value, dt_time):
            self.time_tf.value = value.strftime(UI.input_time_format)
            self.app.page.update()

    # ---------- dialog ----------
    def open(self):
        is_new = self.task.id is None
        content = ft.Container(
            width=UI.dialog_width,
            content=ft.Column(
                [
                    self.title_tf,
                    self.category_tf,
                    self.contents_tf,
                    ft.Row(
                        [
                            self.date_tf,
                            ft.IconButton(
                                icon=ft.Icons.CALENDAR_MONTH,
                                tooltip="Pick date",
                                on_click=lambda e: self.app.page.open(self.date_picker),
                            ),
                            self.time_tf,
                            ft.IconButton(
                                icon=ft.Icons.SCHEDULE,
                                tooltip="Pick time",
                                on_click=lambda e: self.app.page.open(self.time_picker),
                            ),
                        ],
                        spacing=6,
                    ),
                ],
                tight=True,
                spacing=12,
            ),
        )
        self.dialog = open_alert_dialog(
            self.app.page,
            title="New task" if is_new else "Edit task",
            content=content,
            actions=[
                ft.TextButton("Cancel", on_click=lambda e: close_alert_dialog(self.app.page, self.dialog)),
                ft.FilledButton("Save", icon=ft.Icons.CHECK, on_click=self._on_save),
            ],
        )

    def _on_save(self, _):
        if self.date_tf.value and parse_date_input(self.date_tf.value) is None:
            self.date_tf.error_text = "Use dd.mm.yyyy"
            self.app.page.update()
            return
        if self.time_tf.value and parse_time_input(self.time_tf.value) is None:
            self.time_tf.error_text = "Use hh:mm"
            self.app.page.update()
            return

        when = combine_local(self.date_tf.value, self.time_tf.value)
        changes = {
            "title": (self.title_tf.value or "").strip(),
            "category": (self.category_tf.value or "").strip(),
            "contents": self.contents_tf.value or "",
            "date": local_to_storage(when) if when else self.task.date,
        }
        close_alert_dialog(self.app.page, self.dialog)
        self.on_save(self.task, changes)
