from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time in UTC with tzinfo dropped.

    Timestamp columns are TIMESTAMP WITHOUT TIME ZONE and hold UTC by
    convention, so values are compared and stored naive.
    """
    return datetime.now(UTC).replace(tzinfo=None)
