"""Example: drive the journal through the client store (no browser).

Prints a line per render so the set-flags -> fetch -> clear-flags cycle is visible.
"""

import importlib
import sys
from pathlib import Path

from config import get_settings_module

from vedomost.client import AttendanceStore, JsonFileTokenStore, VedomostApi


def print_view(view: dict) -> None:
    if view["screen"] == "login":
        print(f"[login] loading={view['loading']} error={view['error']}")
        return
    if view["loading"]:
        print(f"[app] {view['loading_step']}")
        return
    for row in view["content"].get("journal", []):
        marker = "..." if row["updating"] else (row["status"] or "-")
        print(f"  {row['full_name']:<30} {marker}")


def main(username: str, password: str) -> None:
    settings = importlib.import_module(get_settings_module())
    api = VedomostApi(
        settings.API_BASE_URL,
        token_store=JsonFileTokenStore(Path.home() / ".vedomost" / "session.json"),
        timeout=settings.REQUEST_TIMEOUT,
    )
    store = AttendanceStore(api, notifier=lambda level, message: print(f"({level}) {message}"))
    store.subscribe(print_view)

    store.init()
    if not store.state.logged_in:
        store.login(username, password)

    if store.state.students:
        store.update_status(store.state.students[0]["id"], "present")


if __name__ == "__main__":
    main(*sys.argv[1:3])
