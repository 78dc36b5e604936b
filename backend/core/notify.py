from __future__ import annotations

import logging

from .models import Notification

logger = logging.getLogger(__name__)


def notify(user, title: str, message: str, type: str = "info") -> Notification | None:
    """Queue an in-app notification for ``user``. Missing users are skipped."""
    if user is None:
        return None
    note = Notification.objects.create(user=user, title=title, message=message, type=type)
    logger.debug("Notification %s queued for user %s", note.pk, user.pk)
    return note
