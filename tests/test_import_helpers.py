from datetime import datetime

import pytest

from app.errors import ValidationError
from app.services.import_helpers import get_month_range, parse_minor_units, parse_transaction_date

DEFAULT = datetime(2024, 6, 1, 12, 0)


class TestParseTransactionDate:
    def test_missing_uses_default(self):
        assert parse_transaction_date(None, default=DEFAULT) == DEFAULT
        assert parse_transaction_date("  ", default=DEFAULT) == DEFAULT

    def test_plain_date(self):
        assert parse_transaction_date("2025-11-18", default=DEFAULT) == datetime(2025, 11, 18)

    def test_offset_is_converted_to_utc(self):
        parsed = parse_transaction_date("2025-11-18T07:00:00+07:00", default=DEFAULT)

        assert parsed == datetime(2025, 11, 18, 0, 0)
        assert parsed.tzinfo is None

    def test_zulu_suffix(self):
        assert parse_transaction_date("2025-11-18T09:30:00Z", default=DEFAULT) == datetime(2025, 11, 18, 9, 30)

    def test_garbage(self):
        with pytest.raises(ValidationError):
            parse_transaction_date("yesterday", default=DEFAULT)


class TestGetMonthRange:
    def test_none(self):
        assert get_month_range(None) == (None, None, None)

    def test_regular_month(self):
        start, end, label = get_month_range("2025-02")

        assert start == datetime(2025, 2, 1)
        assert end == datetime(2025, 3, 1)
        assert label == "2025-02"

    def test_december_rolls_over(self):
        _, end, _ = get_month_range("2024-12")

        assert end == datetime(2025, 1, 1)

    @pytest.mark.parametrize("value", ["2025-13", "2025-00", "2025", "25-01", "abc-de", "0000-01", "9999-12"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            get_month_range(value)


class TestParseMinorUnits:
    @pytest.mark.parametrize(
        "raw, expected",
        [("500000", 500000), ("500.000", 500000), ("1 250 000", 1250000), (42, 42), (7.0, 7), ("−300", -300)],
    )
    def test_valid(self, raw, expected):
        assert parse_minor_units(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "12abc", 1.5, True])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            parse_minor_units(raw)
