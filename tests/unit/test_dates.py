from __future__ import annotations

import pytest

from spark.app.domain.errors import ValidationError
from spark.services.dates import is_valid_date_string, require_date, today_date_string


class TestDates:
    def test_today_is_iso_date(self) -> None:
        assert is_valid_date_string(today_date_string())

    @pytest.mark.parametrize("value", ["2024-02-30", "2024-5-1", "05/01/2024", "", None, "2024-05-01T00:00"])
    def test_rejects_invalid(self, value) -> None:
        assert not is_valid_date_string(value)
        with pytest.raises(ValidationError):
            require_date(value)

    def test_accepts_valid(self) -> None:
        assert require_date("2024-02-29") == "2024-02-29"
