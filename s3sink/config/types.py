"""Closed value types used by the connector configuration."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from functools import lru_cache
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from botocore.session import get_session
from pydantic import BaseModel, ConfigDict, Field


class _NamedEnum(str, Enum):
    """String enum whose members can be looked up by name, ignoring case."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None

    @classmethod
    def names(cls) -> list[str]:
        """Return the accepted names in declaration order."""
        return [member.value for member in cls]


class CompressionType(_NamedEnum):
    """Compression applied to the exported objects."""

    NONE = "none"
    GZIP = "gzip"
    SNAPPY = "snappy"
    ZSTD = "zstd"

    @property
    def extension(self) -> str:
        """File name extension for objects written with this compression."""
        return _COMPRESSION_EXTENSIONS[self]


_COMPRESSION_EXTENSIONS = {
    CompressionType.NONE: "",
    CompressionType.GZIP: ".gz",
    CompressionType.SNAPPY: ".snappy",
    CompressionType.ZSTD: ".zst",
}


class OutputFieldType(_NamedEnum):
    """Record component that can be written to an object."""

    KEY = "key"
    VALUE = "value"
    OFFSET = "offset"
    TIMESTAMP = "timestamp"
    HEADERS = "headers"


class OutputFieldEncodingType(_NamedEnum):
    """Encoding applied to binary record components."""

    NONE = "none"
    BASE64 = "base64"


class OutputField(BaseModel):
    """A record component selected for output together with its encoding."""

    model_config = ConfigDict(frozen=True)

    field_type: OutputFieldType = Field(description="Record component")
    encoding_type: OutputFieldEncodingType = Field(
        description="Encoding of the component"
    )


class TimestampSourceType(_NamedEnum):
    """Where the timestamp used for time-based variables comes from."""

    WALLCLOCK = "WALLCLOCK"
    EVENT = "EVENT"


@dataclass(frozen=True)
class TimestampSource:
    """Timestamp source bound to the timezone it reports in."""

    zone: tzinfo
    type: TimestampSourceType

    def time(self, record_timestamp: Union[datetime, int, None] = None) -> datetime:
        """Return the timestamp for a record.

        Args:
            record_timestamp: Record timestamp as a datetime or epoch
                milliseconds. Required for the EVENT source.
        """
        if self.type is TimestampSourceType.WALLCLOCK:
            return datetime.now(self.zone)
        if record_timestamp is None:
            raise ValueError("EVENT timestamp source requires a record timestamp")
        if isinstance(record_timestamp, datetime):
            return record_timestamp.astimezone(self.zone)
        return datetime.fromtimestamp(record_timestamp / 1000, tz=self.zone)


DEFAULT_REGION = "us-east-1"


@lru_cache(maxsize=None)
def supported_regions() -> tuple[str, ...]:
    """Return every S3 region known to botocore, across all partitions."""
    session = get_session()
    regions: set[str] = set()
    for partition in session.get_available_partitions():
        regions.update(session.get_available_regions("s3", partition_name=partition))
    return tuple(sorted(regions))


def region_for_name(name: str) -> str:
    """Return the region identifier or raise ValueError if it is not supported."""
    if name not in supported_regions():
        raise ValueError(f"Cannot create region from name '{name}'")
    return name


_UTC_ALIASES = {"Z", "UTC", "GMT", "UT"}
_OFFSET_PATTERN = re.compile(
    r"^(?:UTC|GMT|UT)?([+-])(\d{1,2})(?::?(\d{2}))?(?::?(\d{2}))?$"
)
_MAX_OFFSET = timedelta(hours=18)


def parse_timezone(value: str) -> tzinfo:
    """
    Parse a timezone identifier.

    Accepts IANA region ids (``Europe/Paris``), ``Z``/``UTC``/``GMT`` and fixed
    offsets with an optional prefix (``+02:00``, ``-0530``, ``UTC+2``).

    Raises:
        ValueError: If the value is not a known timezone
    """
    text = value.strip()
    if text in _UTC_ALIASES:
        return timezone.utc

    match = _OFFSET_PATTERN.match(text)
    if match:
        sign, hours, minutes, seconds = match.groups()
        if int(minutes or 0) > 59 or int(seconds or 0) > 59:
            raise ValueError(f"Invalid offset '{value}'")
        delta = timedelta(
            hours=int(hours), minutes=int(minutes or 0), seconds=int(seconds or 0)
        )
        if delta > _MAX_OFFSET:
            raise ValueError(f"Offset '{value}' is out of range -18:00 to +18:00")
        return timezone(-delta if sign == "-" else delta)

    if not text:
        raise ValueError("Timezone must not be empty")
    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ValueError(f"Unknown timezone '{value}'") from e


def parse_timestamp_source(
    value: str, zone: Optional[tzinfo] = None
) -> TimestampSource:
    """Build a TimestampSource from its type name and timezone (UTC by default)."""
    return TimestampSource(
        zone=zone or timezone.utc, type=TimestampSourceType(value)
    )
