"""
Local wall-clock time conversion.

Release timestamps travel on-chain as unix seconds; users pick them as a
local date-time (the ``datetime-local`` input format ``YYYY-MM-DDTHH:MM``).
"""

import math
from datetime import datetime
from typing import Union

LOCAL_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def local_datetime_to_unix_seconds(value: Union[str, datetime]) -> int:
    """
    Convert a local date-time to unix seconds, floor-rounded.

    Args:
        value: ``YYYY-MM-DDTHH:MM[:SS]`` string or naive datetime,
            interpreted in the host's local timezone

    Returns:
        Seconds since the epoch

    Raises:
        ValueError: If the string is not an ISO local date-time
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())

    return math.floor(value.timestamp())


def unix_seconds_to_local_datetime(seconds: int) -> str:
    """
    Render unix seconds as a local ``YYYY-MM-DDTHH:MM`` string.

    Seconds are dropped, so only whole-minute inputs round-trip exactly.
    """
    return datetime.fromtimestamp(seconds).strftime(LOCAL_INPUT_FORMAT)
