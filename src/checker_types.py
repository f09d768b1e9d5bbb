"""
checker_types.py
user: vhao
date: 10-17-2026

Types defined for use by checker functions.
"""

from typing import Any, List, Optional

from dataclasses import dataclass, field
from datetime import datetime

from checker_constants import (
    DEFAULT_LIMIT,
    DEFAULT_REGIONS,
    DISPLAY_TIMEZONE,
    SELECTED_TTP,
    ttp_to_service_name,
)


@dataclass
class TwilioOptions:
    number: str
    sid: str
    auth: str
    # Phone number the texts are sent to
    to_number: str


@dataclass
class CheckOptions:
    regions: List[str] = field(default_factory=lambda: list(DEFAULT_REGIONS))
    limit: int = DEFAULT_LIMIT
    service_name: str = ttp_to_service_name[SELECTED_TTP]
    timezone: str = DISPLAY_TIMEZONE


@dataclass
class Appointment:
    location: str
    start: str
    end: str
    location_id: Any = None
    # Timezone aware start, used for ordering
    start_time: Optional[datetime] = None


@dataclass
class LocationResult:
    location_id: Any
    appointments: List[Appointment] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CheckResult:
    appointments: List[Appointment]
    failed: List[LocationResult] = field(default_factory=list)
