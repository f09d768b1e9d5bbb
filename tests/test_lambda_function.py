import json
from unittest.mock import AsyncMock, patch

from checker_types import Appointment, CheckOptions, CheckResult
from lambda_function import lambda_handler


def test_lambda_handler_runs_one_check():
    appointment = Appointment(
        "Cincinnati", "11/14/2023, 5:13:20 PM", "11/14/2023, 6:13:20 PM"
    )
    result = CheckResult(appointments=[appointment, appointment])

    with patch("lambda_function.check_appointments",
               new=AsyncMock(return_value=result)) as check, \
            patch("lambda_function.build_reporters", return_value=[]):
        response = lambda_handler({}, None)

    assert response["statusCode"] == 200
    assert "found 2 appointments" in json.loads(response["body"])
    check.assert_awaited_once_with(CheckOptions(), [])
