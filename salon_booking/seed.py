"""Reference data required at runtime: roles and status tables"""

import logging

from sqlalchemy.orm import Session

from . import models
from .domain.appointments.entities import STATUS_DESCRIPTIONS
from .domain.notifications.entities import NOTIFICATION_STATUS_DESCRIPTIONS
from .domain.users.entities import ROLE_DESCRIPTIONS

logger = logging.getLogger(__name__)


def seed_reference_data(db: Session) -> int:
    """Insert missing roles, appointment statuses and notification statuses. Returns rows added."""
    added = 0

    existing_roles = {name for (name,) in db.query(models.Role.name).all()}
    for name, description in ROLE_DESCRIPTIONS.items():
        if name not in existing_roles:
            db.add(models.Role(name=name, description=description))
            added += 1

    existing_statuses = {name for (name,) in db.query(models.AppointmentStatus.name).all()}
    for name, description in STATUS_DESCRIPTIONS.items():
        if name not in existing_statuses:
            db.add(models.AppointmentStatus(name=name, description=description))
            added += 1

    existing_notification_statuses = {name for (name,) in db.query(models.NotificationStatus.name).all()}
    for name, description in NOTIFICATION_STATUS_DESCRIPTIONS.items():
        if name not in existing_notification_statuses:
            db.add(models.NotificationStatus(name=name, description=description))
            added += 1

    if added:
        db.commit()
        logger.info(f"🌱 Seeded {added} reference row(s)")
    return added
