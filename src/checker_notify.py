"""
checker_notify.py
user: vhao
date: 10-17-2026

Reporters the checker hands its sorted appointments to. The console reporter
always runs, texts are only sent when Twilio is configured in
checker_constants.
"""

from typing import List, Optional, TextIO

import sys
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client as TwilioClient
from checker_constants import (
    NOTIFY_PHONE_NUMBER,
    SELECTED_TTP,
    TWILIO_AUTH,
    TWILIO_NUMBER,
    TWILIO_SID,
)
from checker_errors import NotificationError
from checker_logger import getCheckerLogger
from checker_types import Appointment, TwilioOptions


logger = getCheckerLogger(__name__)


class ConsoleReporter:
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def announce(self, message: str) -> None:
        print(message, file=self.stream)

    def report(self, appointments: List[Appointment]) -> None:
        if not appointments:
            print("No appointments found.", file=self.stream)
            return

        for appointment in appointments:
            print(
                f"There is a TTP appointment available at "
                f"{appointment.location} on {appointment.start}!",
                file=self.stream,
            )


class TwilioReporter:
    # Start times listed per text, the rest are only counted
    max_listed = 3

    def __init__(self, options: TwilioOptions, client: Optional[TwilioClient] = None):
        self.options = options
        self.client = client or TwilioClient(options.sid, options.auth)

    def announce(self, message: str) -> None:
        pass

    def format_body(self, appointments: List[Appointment]) -> str:
        truncate = min(len(appointments), self.max_listed)
        listed = "\n".join(
            f"{appointment.location}: {appointment.start}"
            for appointment in appointments[:truncate]
        )
        body = (
            f"[{SELECTED_TTP} CHECKER]: Appointment(s) available!\n"
            f"{listed}"
        )
        if len(appointments) > truncate:
            body += (
                f"\nas well as {len(appointments) - truncate} more! "
                f"To see all times, please check the {SELECTED_TTP} website."
            )
        return body

    def report(self, appointments: List[Appointment]) -> None:
        if not appointments:
            return

        logger.info(
            f"Sending text to {self.options.to_number} to notify user..."
        )
        try:
            message = self.client.messages.create(
                body=self.format_body(appointments),
                from_=self.options.number,
                to=self.options.to_number,
            )
        except TwilioRestException as e:
            logger.error(f"Unable to send text to {self.options.to_number}: {e}")
            raise NotificationError("Failed to send text notification") from e
        logger.debug(f"Successfully sent text with message sid {message.sid}")


def get_twilio_options() -> Optional[TwilioOptions]:
    twilio_options = TwilioOptions(
        TWILIO_NUMBER,
        TWILIO_SID,
        TWILIO_AUTH,
        NOTIFY_PHONE_NUMBER,
    )
    if (
        twilio_options.number and twilio_options.sid and
        twilio_options.auth and twilio_options.to_number
    ):
        return twilio_options
    return None


def build_reporters(stream: Optional[TextIO] = None) -> list:
    reporters: list = [ConsoleReporter(stream)]
    twilio_options = get_twilio_options()
    if twilio_options is not None:
        reporters.append(TwilioReporter(twilio_options))
    else:
        logger.debug("Twilio is not configured, texts will not be sent")
    return reporters
