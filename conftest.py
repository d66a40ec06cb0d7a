import os
import sys
from datetime import datetime, timedelta, timezone as dt_timezone

import pytest

# Ensure backend package is importable when running `pytest` from repo root
BASE_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.join(BASE_DIR, 'backend')
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)


@pytest.fixture
def now():
    return datetime(2025, 6, 1, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def next_month(now):
    return now + timedelta(days=30)
