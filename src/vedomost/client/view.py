"""Builds the whole visible tree from state.

There is no diffing: every render call rebuilds the tree and hands it to the
listeners, which draw it however they like.
"""

from __future__ import annotations

from ..core.enums import AttendanceStatus, Role, Tab
from .state import ClientState

QUICK_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.EXCUSED)

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.EXCUSED: "Excused",
    AttendanceStatus.LATE: "Late",
    AttendanceStatus.LEFT_EARLY: "Left early",
}

ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.TUTOR: "Tutor",
    Role.STAROSTA: "Starosta",
}


def build_view(state: ClientState) -> dict:
    if not state.logged_in:
        return {
            "screen": "login",
            "loading": state.loading,
            "error": state.error,
        }

    return {
        "screen": "app",
        "loading": state.loading,
        "loading_step": state.loading_step if state.loading else "",
        "error": state.error,
        "sidebar": _sidebar(state),
        "header": _header(state),
        "content": _content(state),
    }


def _sidebar(state: ClientState) -> dict:
    tabs = [Tab.JOURNAL]
    if state.is_admin:
        tabs += [Tab.GROUPS, Tab.SETTINGS]
    return {
        "full_name": state.profile.get("full_name"),
        "role_label": ROLE_LABELS.get(state.role, "User"),
        "tabs": [{"id": t.value, "active": t == state.active_tab} for t in tabs],
    }


def _header(state: ClientState) -> dict:
    header = {"tab": state.active_tab.value}
    if state.active_tab == Tab.JOURNAL:
        header["date"] = state.current_date
        if state.sees_all_groups:
            header["group_options"] = [
                {"id": g["id"], "name": g["name"], "selected": g["id"] == state.selected_group_id}
                for g in state.groups
            ]
    return header


def _content(state: ClientState) -> dict:
    if state.active_tab == Tab.GROUPS:
        return {"groups": [{"id": g["id"], "name": g["name"]} for g in state.groups]}
    if state.active_tab == Tab.SETTINGS:
        return {
            "users": [
                {
                    "id": u["id"],
                    "full_name": u.get("full_name") or "(no name)",
                    "username": u.get("username"),
                    "role": u.get("role"),
                    "group_name": u.get("group_name") or "-",
                }
                for u in state.users
            ]
        }
    return {"journal": _journal_rows(state)}


def _journal_rows(state: ClientState) -> list[dict]:
    rows = []
    for student in state.students:
        record = state.attendance_for(student["id"])
        status = record.get("status") if record else None
        rows.append(
            {
                "student_id": student["id"],
                "full_name": student["full_name"],
                "status": status,
                "status_label": STATUS_LABELS.get(AttendanceStatus(status)) if status else None,
                "comment": (record or {}).get("comment") or "",
                "updating": student["id"] in state.updating,
                "buttons": [{"status": s.value, "active": s.value == status} for s in QUICK_STATUSES],
            }
        )
    return rows
