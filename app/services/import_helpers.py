# app/services/import_helpers.py
#
# Import Helper Functions
# Parsing helpers shared by the API and the CSV import script:
# caller-supplied dates, "YYYY-MM" month ranges, and amounts in minor units.

from datetime import date, datetime, timezone

from app.errors import ValidationError


# ---- Dates ----

def parse_transaction_date(value: str | None, default: datetime) -> datetime:
    """
    Parse a caller-supplied date.

    Accepts "2025-11-18" or a full ISO 8601 datetime ("2025-11-18T09:30:00Z").
    Offsets are converted to UTC and dropped (the DB stores naive UTC).
    Returns `default` when no value is given.
    """
    if value is None:
        return default

    s = str(value).strip()
    if not s:
        return default

    try:
        parsed = datetime.fromisoformat(s)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value!r}") from exc

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


# ---- Date Range Utilities ----

def get_month_range(month_str: str | None):
    """
    month_str: 'YYYY-MM' or None.
    Returns (start, end_exclusive, normalized_month_str) as datetimes,
    or (None, None, None) when no month is given.
    """
    if month_str is None or not month_str.strip():
        return None, None, None

    try:
        # 1) pick year/month
        year_str, month_only_str = month_str.strip().split("-")
        year = int(year_str)
        month = int(month_only_str)
        if len(year_str) != 4:
            raise ValueError

        # 2) compute start and first day of next month; date() rejects
        #    month 13, year 0 and the month after 9999-12
        start_date = date(year, month, 1)
        if month == 12:
            end_date_exclusive = date(year + 1, 1, 1)
        else:
            end_date_exclusive = date(year, month + 1, 1)
    except ValueError as exc:
        raise ValidationError(f"Invalid month {month_str!r}, expected YYYY-MM") from exc

    start = datetime.combine(start_date, datetime.min.time())
    end_exclusive = datetime.combine(end_date_exclusive, datetime.min.time())
    return start, end_exclusive, f"{year:04d}-{month:02d}"


# ---- Amounts ----

def parse_minor_units(value) -> int:
    """
    Convert an amount like '500000', '500.000' or '1 250 000' into an int.

    Amounts are whole minor units, so dots, commas and spaces are treated
    as thousand separators. Raises ValidationError for anything else.
    """
    if value is None:
        raise ValidationError("Amount is required")

    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"Amount must be a whole number: {value!r}")
        return int(value)

    s = str(value).strip()

    # Replace Unicode minus with normal minus
    s = s.replace("−", "-")

    # Remove thousand separators
    for sep in (".", ",", " ", " "):
        s = s.replace(sep, "")

    try:
        return int(s)
    except ValueError as exc:
        raise ValidationError(f"Invalid amount: {value!r}") from exc
