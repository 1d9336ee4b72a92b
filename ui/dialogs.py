import flet as ft


def open_alert_dialog(page: ft.Page, *, title: str, content: ft.Control, actions: list[ft.Control]):
    dlg = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=content,
        actions=actions,
        actions_alignment=ft.MainAxisAlignment.END,
    )
    page.open(dlg)
    return dlg


def close_alert_dialog(page: ft.Page, dlg: ft.AlertDialog | None):
    if dlg is None:
        return
    page.close(dlg)


def confirm(page: ft.Page, *, title: str, message: str, on_confirm, confirm_label: str = "Delete"):
    def _cancel(_):
        close_alert_dialog(page, dlg)

    def _ok(_):
        close_alert_dialog(page, dlg)
        on_confirm()

    dlg = open_alert_dialog(
        page,
        title=title,
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancel", on_click=_cancel),
            ft.FilledButton(confirm_label, on_click=_ok),
        ],
    )
    return dlg


def toast(page: ft.Page, text: str):
    page.open(ft.SnackBar(ft.Text(text)))
