from __future__ import annotations

import re
from datetime import datetime, timezone

from spark.app.domain.errors import ValidationError

DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today_date_string() -> str:
    return datetime.now(timezone.utc).strftime(DATE_FORMAT)


def is_valid_date_string(value: str | None) -> bool:
    if not value or not _DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def require_date(value: str | None) -> str:
    if not is_valid_date_string(value):
        raise ValidationError(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")
    return value  # type: ignore[return-value]
