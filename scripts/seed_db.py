"""Seed a demo group with students and a starosta account.

Goes through the service layer (not raw SQL), so the same validation applies.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from vedomost.container import build_container
from vedomost.core.enums import Role
from vedomost.core.exceptions import ConflictError
from vedomost.logging_setup import configure_logging

logger = logging.getLogger("seed_db")

DEMO_GROUP = "DEMO-101"
DEMO_STUDENTS = ["Ivanov Ivan", "Petrova Anna", "Sidorov Pavel", "Kuznetsova Maria"]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=dict(settings.DB_CONFIG), secret_key=settings.SECRET_KEY)

    try:
        group = container.group_service.create_group(DEMO_GROUP)
    except ConflictError:
        logger.info("Demo group already exists, nothing to do")
        return

    for name in DEMO_STUDENTS:
        container.student_service.create_student(full_name=name, group_id=group.id)

    container.user_service.create_user(
        username="starosta",
        password="starosta123",
        full_name="Demo Starosta",
        role=Role.STAROSTA.value,
        group_id=group.id,
    )
    logger.info("Seeded group %s with %d students and user 'starosta'", DEMO_GROUP, len(DEMO_STUDENTS))


if __name__ == "__main__":
    main()
