from typing import Dict, List
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
import requests


LOCATIONS = [
    {"id": 1, "name": "Cincinnati", "shortName": "CVG", "state": "OH"},
    {"id": 2, "name": "Louisville", "shortName": "SDF", "state": "KY"},
    {"id": 3, "name": "Chicago", "shortName": "ORD", "state": "IL"},
    {"id": 4, "name": "Seattle", "shortName": "SEA", "state": "WA"},
]


def make_response(payload=None, status_code: int = 200, invalid_json: bool = False):
    res = MagicMock(spec=requests.Response)
    res.status_code = status_code
    res.ok = status_code < 400
    if invalid_json:
        res.json.side_effect = ValueError("Expecting value: line 1 column 1")
    else:
        res.json.return_value = payload
    return res


def make_slot(location_id, start, end=None) -> Dict:
    return {
        "locationId": location_id,
        "startTimestamp": start,
        "endTimestamp": end if end is not None else start,
    }


class FakeSession:
    """Stands in for requests.Session, answering by endpoint and locationId."""

    def __init__(self, locations: List[Dict], slots: Dict = None):
        self.locations = locations
        self.slots = slots or {}
        # locationId -> response or exception to raise
        self.overrides: Dict = {}
        self.locations_response = None
        self.sent = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def send(self, prepared, timeout=None):
        self.sent.append(prepared)
        url = urlparse(prepared.url)
        if url.path.startswith("/schedulerapi/locations"):
            if self.locations_response is not None:
                return self.locations_response
            return make_response(self.locations)

        location_id = int(parse_qs(url.query)["locationId"][0])
        override = self.overrides.get(location_id)
        if isinstance(override, Exception):
            raise override
        if override is not None:
            return override
        return make_response(self.slots.get(location_id, []))

    def slot_requests(self) -> List:
        return [
            prepared for prepared in self.sent
            if urlparse(prepared.url).path == "/schedulerapi/slots"
        ]


@pytest.fixture
def locations() -> List[Dict]:
    return [dict(location) for location in LOCATIONS]


@pytest.fixture
def session(locations) -> FakeSession:
    return FakeSession(
        locations,
        slots={
            1: [make_slot(1, 1700000000000, 1700003600000)],
            2: [make_slot(2, "2023-11-14T08:00", "2023-11-14T08:15")],
            3: [
                make_slot(3, "2023-11-20T09:00", "2023-11-20T09:15"),
                make_slot(3, "2023-11-13T13:30", "2023-11-13T13:45"),
            ],
        },
    )
