from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC timestamp in millisecond ISO-8601 form, e.g. 2024-01-01T00:00:00.000Z."""
    moment = moment or utcnow()
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
