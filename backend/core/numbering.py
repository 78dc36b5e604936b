from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from django.db import transaction
from django.utils import timezone

from .errors import NotFound
from .models import DocumentCounter

logger = logging.getLogger(__name__)


def format_document_number(prefix: str, value: int, year: int) -> str:
    return f"{prefix}-{year}-{value:04d}"


def next_document_number(counter_key: str, *, today: Optional[date] = None) -> str:
    """
    Atomically bump the counter for ``counter_key`` and return the formatted
    number, e.g. ``INV-2024-0042``. The counter is global, not per year.
    """
    today = today or timezone.localdate()
    with transaction.atomic():
        counter = (
            DocumentCounter.objects.select_for_update()
            .filter(counter_key=counter_key)
            .first()
        )
        if counter is None:
            raise NotFound(f"No document counter configured for '{counter_key}'")
        counter.counter_value += 1
        counter.save(update_fields=["counter_value"])
    number = format_document_number(counter.prefix, counter.counter_value, today.year)
    logger.debug("Allocated document number %s", number)
    return number
