"""
checker_utils.py
user: vhao
date: 10-17-2026

Queries the TTP scheduler API for operational locations and the soonest
available appointments at each of them.
"""


from typing import Any, Dict, Iterable, List, Optional

import asyncio
import copy
import functools
import json
import requests
import pandas as pd
from collections import defaultdict
from requests.adapters import HTTPAdapter
from checker_constants import (
    DISPLAY_TIMEZONE,
    LOCATIONS_API,
    LOCATIONS_PARAMS,
    MAX_CONCURRENT_REQUESTS,
    REQUEST_TIMEOUT,
    SCHEDULER_API,
    SCHEDULER_PARAMS,
    SELECTED_TTP,
    UNKNOWN_LOCATION,
    ttp_to_service_name,
)
from checker_errors import (
    CheckerError,
    SchedulerRequestError,
    SchedulerResponseError,
)
from checker_logger import getCheckerLogger
from checker_types import Appointment, CheckResult, LocationResult


logger = getCheckerLogger(__name__)


def pretty_fmt_req(req) -> str:
    if req.headers.items():
        return ('{}\r\n{}'.format(
            req.method + ' ' + req.url,
            '\r\n'.join('{}: {}'.format(k, v) for k, v in req.headers.items()),
        ))
    else:
        return ('{}'.format(
            req.method + ' ' + req.url,
        ))


# Formats raw locations JSON into something user readable
def pretty_fmt_locations(raw_locations: List[Dict]) -> str:
    state_to_location = defaultdict(list)
    for location in raw_locations:
        state = location.get("state") or "??"
        state_to_location[state].append({
            "name": location.get("name"),
            "shortName": location.get("shortName"),
            "locationId": location.get("id"),
        })
    return json.dumps(state_to_location, indent=4, sort_keys=True)


# Creates a Session whose connection pool fits every concurrent request
def create_session() -> requests.Session:
    adapter = HTTPAdapter(
        pool_connections=MAX_CONCURRENT_REQUESTS,
        pool_maxsize=MAX_CONCURRENT_REQUESTS,
    )
    session = requests.Session()
    session.mount('https://', adapter)
    return session


async def send_request(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict] = None,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    if not session:
        with create_session() as session:
            return await send_request(url, params, headers, session)

    prepared = requests.Request(
        'GET', url, params=params, headers=headers).prepare()
    pretty_request = pretty_fmt_req(prepared)
    logger.debug(f"Sending request: {pretty_request}")

    try:
        loop = asyncio.get_event_loop()
        res = await loop.run_in_executor(
            None, functools.partial(session.send, prepared, timeout=REQUEST_TIMEOUT)
        )
    except requests.RequestException as e:
        logger.error(f"Request failed to complete ({pretty_request}): {e}")
        raise SchedulerRequestError(
            f"Request to {prepared.url} failed: {e}", url=prepared.url
        ) from e

    if res.ok:
        return res
    elif res.status_code >= 400 and res.status_code < 500:
        logger.error(
            f"Request failed with status code {res.status_code}. "
            "Some potentially fatal user error occured. Perhaps the "
            "site API has changed?")
        raise SchedulerRequestError(
            "Request failed with client error",
            url=prepared.url,
            status_code=res.status_code,
        )
    else:
        logger.error(
            f"Request failed with status code {res.status_code}. "
            "Server may be experiencing significant issues"
        )
        raise SchedulerRequestError(
            "Request failed with server error",
            url=prepared.url,
            status_code=res.status_code,
        )


def parse_json_list(res: requests.Response, what: str) -> List[Any]:
    try:
        data = res.json()
    except ValueError as e:
        raise SchedulerResponseError(f"Response for {what} is not valid JSON") from e

    if not isinstance(data, list):
        raise SchedulerResponseError(
            f"Expected a list of {what}, got {type(data).__name__}"
        )
    return data


"""
Returns every operational location for the given service exactly as the
API sent it.

Raises:
    SchedulerRequestError: The request failed or returned an error status.
    SchedulerResponseError: The body is not a JSON list.
"""
async def get_all_locations(
    service_name: str = ttp_to_service_name[SELECTED_TTP],
    session: Optional[requests.Session] = None,
) -> List[Dict]:
    params = copy.deepcopy(LOCATIONS_PARAMS)
    params["serviceName"] = service_name

    logger.info(f"Getting {service_name} locations from TTP website...")
    res = await send_request(LOCATIONS_API, params=params, session=session)
    locations = parse_json_list(res, "locations")
    logger.info(f"Found {len(locations)} operational locations")
    return locations


def get_location_ids(locations: List[Dict], regions: Iterable[str]) -> List[Any]:
    allowed = set(regions)
    return [
        location["id"] for location in locations
        if location.get("state") in allowed
    ]


# Converts a slot timestamp to an aware timestamp in the given timezone.
# Numbers are epoch milliseconds (UTC). Strings without an offset, which is
# what the live API sends ("2023-11-14T08:00"), are wall clock times and are
# taken to already be in the given timezone.
def localize_timestamp(value: Any, timezone: str = DISPLAY_TIMEZONE) -> pd.Timestamp:
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            ts = pd.Timestamp(value, unit="ms", tz="UTC")
        else:
            ts = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise SchedulerResponseError(f"Unparseable timestamp: {value!r}") from e

    if pd.isna(ts):
        raise SchedulerResponseError(f"Unparseable timestamp: {value!r}")

    if ts.tzinfo is None:
        return ts.tz_localize(timezone, ambiguous=True, nonexistent="shift_forward")
    return ts.tz_convert(timezone)


# Formats like the US English locale, e.g. "11/14/2023, 5:13:20 PM"
def format_display_time(ts: pd.Timestamp) -> str:
    hour = ts.hour % 12 or 12
    meridiem = "AM" if ts.hour < 12 else "PM"
    return (
        f"{ts.month}/{ts.day}/{ts.year}, "
        f"{hour}:{ts.minute:02d}:{ts.second:02d} {meridiem}"
    )


# Maps location ids to names. The first location wins if an id repeats.
# A location without a name is shown by its shortName, or failing that its id.
def index_location_names(locations: List[Dict]) -> Dict[Any, str]:
    names: Dict[Any, str] = {}
    for location in locations:
        if "id" not in location or location["id"] in names:
            continue

        name = location.get("name")
        if not name:
            logger.warning(
                f"Location {location['id']} has no name, using its "
                "shortName or id instead"
            )
            name = location.get("shortName") or location["id"]
        names[location["id"]] = str(name)
    return names


def build_appointments(
    locations: List[Dict],
    slots: List[Dict],
    timezone: str = DISPLAY_TIMEZONE,
) -> List[Appointment]:
    location_names = index_location_names(locations)

    appointments = []
    for slot in slots:
        try:
            location_id = slot["locationId"]
            start_raw = slot["startTimestamp"]
            end_raw = slot["endTimestamp"]
        except (KeyError, TypeError) as e:
            raise SchedulerResponseError(f"Malformed slot: {slot!r}") from e

        if location_id in location_names:
            location_name = location_names[location_id]
        else:
            # The slots and locations endpoints disagree, keep the slot but
            # make the mismatch visible
            logger.warning(
                f"Slot references locationId {location_id} which is not in "
                "the locations list"
            )
            location_name = UNKNOWN_LOCATION

        start_time = localize_timestamp(start_raw, timezone)
        end_time = localize_timestamp(end_raw, timezone)
        appointments.append(Appointment(
            location=location_name,
            start=format_display_time(start_time),
            end=format_display_time(end_time),
            location_id=location_id,
            start_time=start_time,
        ))
    return appointments


async def fetch_location_appointments(
    locations: List[Dict],
    location_id: Any,
    limit: int,
    timezone: str,
    session: requests.Session,
    semaphore: asyncio.Semaphore,
) -> LocationResult:
    params = copy.deepcopy(SCHEDULER_PARAMS)
    params["limit"] = limit
    params["locationId"] = location_id

    async with semaphore:
        try:
            logger.info(f"Location {location_id}: Checking for appointments...")
            res = await send_request(SCHEDULER_API, params=params, session=session)
            slots = parse_json_list(res, "slots")
            appointments = build_appointments(locations, slots, timezone)
        except CheckerError as e:
            logger.error(
                f"Location {location_id}: Unable to get appointments: {e}"
            )
            return LocationResult(location_id, error=e)

    logger.info(
        f"Location {location_id}: Found {len(appointments)} "
        "available appointments"
    )
    return LocationResult(location_id, appointments=appointments)


"""
Requests the soonest `limit` slots of every location id at once, with at
most MAX_CONCURRENT_REQUESTS requests in flight.

Returns one LocationResult per location id, in the order of location_ids.
A location whose request fails carries the error instead of appointments
and does not affect the other locations.
"""
async def get_available_appointments(
    locations: List[Dict],
    location_ids: List[Any],
    limit: int,
    timezone: str = DISPLAY_TIMEZONE,
    session: Optional[requests.Session] = None,
) -> List[LocationResult]:
    if not session:
        with create_session() as session:
            return await get_available_appointments(
                locations, location_ids, limit, timezone, session
            )

    semaphore = asyncio.Semaphore(MAX_CONCURRENT_REQUESTS)
    tasks = []
    for location_id in location_ids:
        tasks.append(
            asyncio.create_task(
                fetch_location_appointments(
                    locations, location_id, limit, timezone, session, semaphore
                )
            )
        )

    return list(await asyncio.gather(*tasks))


def merge_results(results: List[LocationResult]) -> CheckResult:
    appointments: List[Appointment] = []
    failed: List[LocationResult] = []
    for result in results:
        if result.ok:
            appointments.extend(result.appointments)
        else:
            failed.append(result)
    return CheckResult(appointments=appointments, failed=failed)


def sort_appointments(appointments: List[Appointment]) -> List[Appointment]:
    return sorted(appointments, key=lambda appointment: appointment.start_time)
