from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_enum
from ..core.enums import AttendanceStatus, Role, Tab
from ..core.exceptions import ValidationError
from .api import VedomostApi
from .http import ApiError
from .state import ClientState
from .view import build_view

logger = logging.getLogger(__name__)

Listener = Callable[[dict], None]
Notifier = Callable[[str, str], None]


class AttendanceStore:
    """Owns the ClientState and runs every action through the same cycle:

    set flags -> render -> fetch -> merge into state -> clear flags -> render.
    """

    def __init__(self, api: VedomostApi, *, notifier: Optional[Notifier] = None):
        self.state = ClientState()
        self._api = api
        self._api.on_unauthorized = self._on_session_expired
        self._listeners: list[Listener] = []
        self._notify: Notifier = notifier or (lambda level, message: None)

    # -- render loop -------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def render(self) -> dict:
        view = build_view(self.state)
        for listener in list(self._listeners):
            listener(view)
        return view

    def _report(self, error: Exception) -> None:
        message = getattr(error, "message", None) or str(error)
        self.state.error = message
        logger.warning("Action failed: %s", message)
        self._notify("error", message)

    def _busy(self) -> bool:
        if self.state.loading:
            logger.debug("Busy with %r, action ignored", self.state.loading_step)
            return True
        return False

    def _run(self, step: str, action: Callable[[], Any]) -> bool:
        if self._busy():
            return False

        self.state.loading = True
        self.state.loading_step = step
        self.state.error = None
        self.render()
        try:
            action()
            return True
        except (ApiError, ValidationError) as e:
            self._report(e)
            return False
        finally:
            self.state.loading = False
            self.state.loading_step = ""
            self.render()

    def _on_session_expired(self) -> None:
        logger.debug("Session reset")
        self.state = ClientState(current_date=self.state.current_date)

    # -- loaders -----------------------------------------------------

    def _fetch_profile(self) -> None:
        self.state.loading_step = "Loading profile..."
        self.state.profile = self._api.get_profile()
        self._fetch_groups_and_data()

    def _fetch_groups_and_data(self) -> None:
        self.state.loading_step = "Loading groups..."
        if self.state.sees_all_groups:
            self.state.groups = self._api.list_groups()
            known = {g["id"] for g in self.state.groups}
            if self.state.selected_group_id not in known:
                self.state.selected_group_id = None
        else:
            self.state.groups = []
            self.state.selected_group_id = self.state.profile.get("group_id")
        self._fetch_data()

    def _fetch_data(self) -> None:
        self.state.loading_step = "Loading journal..."
        group_id = self.state.selected_group_id
        if not group_id and not self.state.sees_all_groups:
            self.state.students = []
            self.state.attendance = []
            return

        self.state.students = self._api.list_students(group_id=group_id)
        self.state.attendance = self._api.list_attendance(date=self.state.current_date, group_id=group_id)

    def _fetch_groups(self) -> None:
        self.state.groups = self._api.list_groups()

    def _fetch_users(self) -> None:
        self.state.users = self._api.list_users()

    # -- session -----------------------------------------------------

    def init(self) -> None:
        """Restore a persisted session, or show the login screen."""
        if self._api.has_token:
            self.load_profile()
        else:
            self.render()

    def login(self, username: str, password: str) -> bool:
        def action() -> None:
            result = self._api.login(username, password)
            self.state.profile = result["profile"]
            self._fetch_groups_and_data()

        return self._run("Signing in...", action)

    def logout(self) -> None:
        self.state.loading = True
        self.render()
        self._api.clear_token()
        self.state = ClientState(current_date=self.state.current_date)
        self.render()

    def load_profile(self) -> bool:
        return self._run("Loading profile...", self._fetch_profile)

    def load_data(self) -> bool:
        return self._run("Loading journal...", self._fetch_data)

    # -- navigation --------------------------------------------------

    def switch_tab(self, tab: Tab | str) -> bool:
        if self._busy():
            return False
        try:
            tab = require_enum(tab, Tab, "tab")
        except ValidationError as e:
            self._report(e)
            self.render()
            return False
        if tab != Tab.JOURNAL and not self.state.is_admin:
            self._notify("error", "Only administrators can open this section")
            return False

        self.state.active_tab = tab
        if tab == Tab.SETTINGS:
            return self._run("Loading users...", self._fetch_users)
        if tab == Tab.GROUPS:
            return self._run("Loading groups...", self._fetch_groups)
        return self._run("Loading journal...", self._fetch_data)

    def set_date(self, day: str) -> bool:
        if self._busy():
            return False
        try:
            parse_iso_date(day)
        except ValidationError as e:
            self._report(e)
            self.render()
            return False
        self.state.current_date = day
        return self.load_data()

    def select_group(self, group_id: Optional[str]) -> bool:
        if self._busy():
            return False
        self.state.selected_group_id = group_id or None
        return self.load_data()

    # -- attendance --------------------------------------------------

    def update_status(self, student_id: str, status: AttendanceStatus | str, *, comment: Optional[str] = None) -> bool:
        """Mark one student; ignored while an update for the same student is in flight."""
        if student_id in self.state.updating:
            logger.debug("Update for %s already in flight, ignoring", student_id)
            return False

        try:
            status = require_enum(status, AttendanceStatus, "status")
        except ValidationError as e:
            self._report(e)
            self.render()
            return False

        student = self.state.student(student_id) or {}
        self.state.updating.add(student_id)
        self.state.error = None
        self.render()
        try:
            self._api.mark_attendance(
                student_id=student_id,
                date=self.state.current_date,
                status=status.value,
                comment=comment,
                group_id=student.get("group_id"),
            )
            self._fetch_data()
            return True
        except ApiError as e:
            self._report(e)
            return False
        finally:
            self.state.updating.discard(student_id)
            self.render()

    def save_options(self, student_id: str, status: AttendanceStatus | str, comment: str) -> bool:
        """Status plus free-text comment; an empty comment clears the stored one."""
        return self.update_status(student_id, status, comment=comment or "")

    # -- groups and students (admin) ---------------------------------

    def create_group(self, name: str) -> bool:
        name = (name or "").strip()
        if not name:
            self._notify("error", "Group name is required")
            return False

        def action() -> None:
            self._api.create_group(name)
            self._fetch_groups_and_data()

        return self._run("Creating group...", action)

    def delete_group(self, group_id: str) -> bool:
        def action() -> None:
            self._api.delete_group(group_id)
            if self.state.selected_group_id == group_id:
                self.state.selected_group_id = None
            self._fetch_groups_and_data()

        return self._run("Deleting group...", action)

    def create_student(self, full_name: str, group_id: Optional[str] = None) -> bool:
        group_id = group_id or self.state.selected_group_id
        if not (full_name or "").strip() or not group_id:
            self._notify("error", "Full name and group are required")
            return False

        def action() -> None:
            self._api.create_student(full_name=full_name.strip(), group_id=group_id)
            self._fetch_data()

        return self._run("Adding student...", action)

    def delete_student(self, student_id: str) -> bool:
        def action() -> None:
            self._api.delete_student(student_id)
            self._fetch_data()

        return self._run("Deleting student...", action)

    # -- users (admin) -----------------------------------------------

    def load_users(self) -> bool:
        return self._run("Loading users...", self._fetch_users)

    def create_user(
        self,
        *,
        username: str,
        password: str,
        full_name: str,
        role: Role | str = Role.STAROSTA,
        group_id: Optional[str] = None,
    ) -> bool:
        if not full_name or not username or not password:
            self._notify("error", "Please fill in full name, username and password")
            return False

        def action() -> None:
            self._api.create_user(
                username=username,
                password=password,
                full_name=full_name,
                role=require_enum(role, Role, "role").value,
                group_id=group_id or None,
            )
            self._fetch_users()

        ok = self._run("Creating user...", action)
        if ok:
            self._notify("success", f"User {full_name} created")
        return ok

    def update_user(self, user_id: str, **changes: Any) -> bool:
        def action() -> None:
            self._api.update_user(user_id, **changes)
            self._fetch_users()

        return self._run("Saving user...", action)

    def delete_user(self, user_id: str) -> bool:
        def action() -> None:
            self._api.delete_user(user_id)
            self._fetch_users()

        return self._run("Deleting user...", action)
