# taskapp/ui/pages/task_list.py
from __future__ import annotations

import flet as ft

from core.settings import UI
from models.task import Task
from ui.dialogs import confirm, toast
from ui.pages.task_input import TaskInputDialog
from ui.presenter import TaskListPresenter


class TaskListPage:
    """The single screen: search bar, task rows and an add button."""

    def __init__(self, app, presenter: TaskListPresenter, initial_query: str = ""):
        self.app = app
        self.presenter = presenter

        self.search_tf = ft.TextField(
            hint_text="Search by category",
            value=initial_query,
            prefix_icon=ft.Icons.SEARCH,
            on_change=self.on_search_change,
            on_submit=self.on_search_submit,
            dense=True,
            expand=True,
        )
        self.task_list = ft.ListView(expand=True, spacing=2)
        self.empty_text = ft.Text("No tasks", color=UI.theme.text_subtle, visible=False)

        self.view = ft.Container(
            expand=True,
            padding=12,
            content=ft.Column(
                [
                    ft.Row([self.search_tf]),
                    self.empty_text,
                    self.task_list,
                ],
                spacing=10,
                expand=True,
            ),
        )
        self.fab = ft.FloatingActionButton(icon=ft.Icons.ADD, tooltip="New task", on_click=self.on_add)

    def load(self):
        self.presenter.query = self.search_tf.value or ""
        self.presenter.refresh()
        self.render()

    # ---------- rendering ----------
    def render(self):
        self.task_list.controls.clear()
        for task in self.presenter.tasks:
            self.task_list.controls.append(self._row_for_task(task))
        self.empty_text.visible = not self.presenter.tasks
        self.app.page.update()

    def _row_for_task(self, task: Task) -> ft.Control:
        title, when = self.presenter.row_text(task)
        subtitle = [ft.Text(when, size=12, color=UI.theme.text_subtle)]
        if task.category:
            subtitle.append(
                ft.Container(
                    content=ft.Text(task.category, size=11, color=UI.theme.category_text),
                    bgcolor=UI.theme.category_chip,
                    border_radius=8,
                    padding=ft.padding.symmetric(horizontal=6, vertical=1),
                )
            )
        return ft.ListTile(
            title=ft.Text(title or "(untitled)", max_lines=1, overflow=ft.TextOverflow.ELLIPSIS),
            subtitle=ft.Row(subtitle, spacing=8),
            data=task.id,
            on_click=lambda e, t=task: self.open_editor(t),
            trailing=ft.IconButton(
                icon=ft.Icons.DELETE_OUTLINE,
                icon_color=UI.theme.danger,
                tooltip="Delete",
                on_click=lambda e, t=task: self.on_delete(t),
            ),
        )

    # ---------- intents ----------
    def on_search_change(self, e: ft.ControlEvent):
        self.presenter.set_query(e.control.value or "")
        self.render()

    def on_search_submit(self, e: ft.ControlEvent):
        self.presenter.commit_query(e.control.value or "")
        self.render()

    def on_add(self, _):
        self.open_editor(self.presenter.new_draft())

    def open_editor(self, task: Task):
        TaskInputDialog(self.app, task, on_save=self._save).open()

    def _save(self, task: Task, changes: dict):
        saved = self.presenter.save(task, **changes)
        self.render()
        if saved is not None:
            toast(self.app.page, "Task saved")

    def on_delete(self, task: Task):
        def _do_delete():
            if self.presenter.delete(task.id):
                toast(self.app.page, "Task deleted")
            self.render()

        confirm(
            self.app.page,
            title="Delete task?",
            message=task.title or "(untitled)",
            on_confirm=_do_delete,
        )
