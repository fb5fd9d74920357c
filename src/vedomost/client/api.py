from __future__ import annotations

from typing import Any, Optional

from .http import ApiClient


class VedomostApi(ApiClient):
    """Endpoint helpers over ApiClient, one per REST route."""

    def login(self, username: str, password: str) -> dict:
        result = self.post(
            "/api/login",
            json={"username": username, "password": password},
            authenticated=False,
        )
        self.token_store.set(result["token"])
        return result

    def get_profile(self) -> dict:
        return self.get("/api/profile")

    def list_groups(self) -> list:
        return self.get("/api/groups")

    def create_group(self, name: str) -> dict:
        return self.post("/api/groups", json={"name": name})

    def delete_group(self, group_id: str) -> Any:
        return self.delete(f"/api/groups/{group_id}")

    def list_students(self, *, group_id: Optional[str] = None) -> list:
        return self.get("/api/students", params={"group_id": group_id})

    def create_student(self, *, full_name: str, group_id: str) -> dict:
        return self.post("/api/students", json={"full_name": full_name, "group_id": group_id})

    def delete_student(self, student_id: str) -> Any:
        return self.delete(f"/api/students/{student_id}")

    def list_attendance(self, *, date: Optional[str] = None, group_id: Optional[str] = None) -> list:
        return self.get("/api/attendance", params={"date": date, "group_id": group_id})

    def mark_attendance(
        self,
        *,
        student_id: str,
        date: str,
        status: str,
        comment: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> dict:
        payload = {"student_id": student_id, "date": date, "status": status}
        if comment is not None:
            payload["comment"] = comment
        if group_id:
            payload["group_id"] = group_id
        return self.post("/api/attendance", json=payload)

    def export_attendance(
        self,
        *,
        start: str,
        end: Optional[str] = None,
        group_id: Optional[str] = None,
        collapse: Optional[bool] = None,
    ) -> bytes:
        params = {"from": start, "to": end, "group_id": group_id}
        if collapse is not None:
            params["collapse"] = "1" if collapse else "0"
        return self.get("/api/attendance/export", params=params, headers={"Accept": "text/csv"})

    def list_users(self) -> list:
        return self.get("/api/admin/users")

    def create_user(self, **fields: Any) -> dict:
        return self.post("/api/admin/users", json=fields)

    def update_user(self, user_id: str, **changes: Any) -> dict:
        return self.patch(f"/api/admin/users/{user_id}", json=changes)

    def delete_user(self, user_id: str) -> Any:
        return self.delete(f"/api/admin/users/{user_id}")
