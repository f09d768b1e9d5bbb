"""
lambda_function.py
user: vhao
date: 10-17-2026

AWS Lambda entrypoint.
"""

import asyncio
import json
from appointment_checker import check_appointments
from checker_notify import build_reporters
from checker_types import CheckOptions

def lambda_handler(event, context):
    result = asyncio.run(check_appointments(CheckOptions(), build_reporters()))
    return {
        'statusCode': 200,
        'body': json.dumps(
            f'Check complete, found {len(result.appointments)} appointments. '
            'Lambda finished.'
        )
    }
