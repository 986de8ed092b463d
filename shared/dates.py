# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""
Calendar-day helpers.

Every puzzle date is normalized to midnight UTC of the day it is active. The
"today" window used for lookups is the half-open interval starting at that
midnight and lasting 24 hours.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional, Tuple

DAY = timedelta(days=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Returns an aware UTC datetime. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(value: datetime) -> datetime:
    value = as_utc(value)
    return datetime.combine(value.date(), time.min, tzinfo=timezone.utc)


def day_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Returns [start, end) for the UTC calendar day containing `now`."""
    start = start_of_day(now or utc_now())
    return start, start + DAY


def is_start_of_day(value: datetime) -> bool:
    return as_utc(value) == start_of_day(value)


def coerce_datetime(value: Any) -> datetime:
    """
    Coerces a stored date value into an aware UTC datetime.

    Accepts datetimes (including Firestore timestamps, which subclass
    datetime), `date` objects and ISO-8601 strings such as "2025-04-01" or
    "2025-04-01T00:00:00.000Z". Anything else is returned unchanged so the
    caller's type check rejects it.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return as_utc(datetime.fromisoformat(text))
        except ValueError:
            return value
    return value


def format_timestamp(value: datetime) -> str:
    """Formats as ISO-8601 with millisecond precision, e.g. 2025-04-01T00:00:00.000Z."""
    value = as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
