from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Student:
    id: str
    full_name: str
    group_id: str

    def to_dict(self) -> dict:
        return asdict(self)
