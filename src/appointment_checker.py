"""
appointment_checker.py
user: vhao
date: 10-17-2026

Queries the ttp.dhs.gov scheduler for the soonest TTP appointments at every
operational location in the selected states and reports them, soonest first.
"""

from typing import List, Optional

import argparse
import asyncio
import sys
import traceback
import requests
from checker_constants import (
    DEFAULT_LIMIT,
    DEFAULT_REGIONS,
    RERUN_INTERVAL,
    SELECTED_TTP,
    ttp_to_service_name,
)
from checker_errors import AppointmentFetchError, CheckerError
from checker_logger import getCheckerLogger
from checker_notify import build_reporters
from checker_types import CheckOptions, CheckResult
from checker_utils import (
    create_session,
    get_all_locations,
    get_available_appointments,
    get_location_ids,
    merge_results,
    pretty_fmt_locations,
    sort_appointments,
)


logger = getCheckerLogger(__name__)


"""
Runs one full check: locations, region filter, appointments per location,
then hands the appointments to every reporter sorted by start time.

Locations whose request failed are left out and returned in
CheckResult.failed. Raises AppointmentFetchError if all of them failed.
"""
async def check_appointments(
    options: CheckOptions,
    reporters: List,
    session: Optional[requests.Session] = None,
) -> CheckResult:
    if not session:
        with create_session() as session:
            return await check_appointments(options, reporters, session=session)

    logger.info("Checking for appointments...")

    locations = await get_all_locations(options.service_name, session=session)
    location_ids = get_location_ids(locations, options.regions)
    logger.info(
        f"Found {len(location_ids)} locations in {', '.join(options.regions)}"
    )

    results = await get_available_appointments(
        locations,
        location_ids,
        options.limit,
        timezone=options.timezone,
        session=session,
    )
    result = merge_results(results)
    for failed in result.failed:
        logger.warning(
            f"Location {failed.location_id}: Skipped, no appointments "
            f"could be fetched ({failed.error})"
        )

    if location_ids and len(result.failed) == len(location_ids):
        raise AppointmentFetchError(
            f"Unable to get appointments for any of the "
            f"{len(location_ids)} locations"
        )

    result.appointments = sort_appointments(result.appointments)
    for reporter in reporters:
        reporter.report(result.appointments)
    return result


async def run_periodically(
    options: CheckOptions,
    reporters: List,
    interval: float = RERUN_INTERVAL,
    iterations: Optional[int] = None,
    session: Optional[requests.Session] = None,
) -> None:
    # Every check reports everything it finds, appointments that were
    # already reported are reported again
    if not session:
        with create_session() as session:
            return await run_periodically(
                options, reporters, interval, iterations, session
            )

    runs = 0
    while True:
        try:
            await check_appointments(options, reporters, session=session)
        except CheckerError as e:
            logger.error(
                "".join(traceback.format_exception(None, e, e.__traceback__))
            )
            logger.error("Check failed, will check again after sleeping")

        runs += 1
        if iterations is not None and runs >= iterations:
            break

        logger.info(f"Sleeping for {interval} seconds...")
        await asyncio.sleep(interval)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find the soonest available TTP appointments."
    )
    parser.add_argument(
        "--regions",
        nargs="+",
        metavar="STATE",
        default=list(DEFAULT_REGIONS),
        help="State codes of the locations to check (default: %(default)s)",
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        default=DEFAULT_LIMIT,
        help="Appointments to fetch per location (default: %(default)s)",
    )
    parser.add_argument(
        "--service",
        choices=sorted(ttp_to_service_name),
        default=SELECTED_TTP,
        help="Trusted Traveler Program (default: %(default)s)",
    )
    parser.add_argument(
        "--interval",
        type=positive_int,
        nargs="?",
        const=RERUN_INTERVAL,
        default=None,
        metavar="SECONDS",
        help=(
            "Keep checking, sleeping this many seconds between checks "
            f"({RERUN_INTERVAL} if no value is given)"
        ),
    )
    parser.add_argument(
        "--list-locations",
        action="store_true",
        help="Print the operational locations grouped by state and exit",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    options = CheckOptions(
        regions=[region.upper() for region in args.regions],
        limit=args.limit,
        service_name=ttp_to_service_name[args.service],
    )
    reporters = build_reporters()
    console = reporters[0]
    console.announce("Starting appointment checker...")

    try:
        if args.list_locations:
            with create_session() as session:
                locations = asyncio.run(
                    get_all_locations(options.service_name, session=session)
                )
            console.announce(pretty_fmt_locations(locations))
            return 0

        if args.interval is not None:
            asyncio.run(run_periodically(options, reporters, args.interval))
            return 0

        result = asyncio.run(check_appointments(options, reporters))
    except CheckerError as e:
        logger.fatal(
            "".join(traceback.format_exception(None, e, e.__traceback__))
        )
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 0

    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
