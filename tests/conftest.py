import os
import sys

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from engine.records import Record


REJECT = "SM - Activate PDP Context Reject"
DETACH = "GMM - Detach Request"


def make_records(*pairs):
    return [Record(timestamp=ts, message=msg) for ts, msg in pairs]


@pytest.fixture
def retry_records():
    """Two closed cycles of three rejects each, with a marker inside the first."""
    return make_records(
        ("10:00:00.000000", REJECT),
        ("10:00:05.000000", REJECT),
        ("10:00:06.000000", "RRC Connection Release"),
        ("10:00:10.000000", REJECT),
        ("10:00:11.000000", DETACH),
        ("10:00:40.000000", REJECT),
        ("10:00:45.000000", REJECT),
        ("10:00:50.000000", REJECT),
        ("10:00:51.000000", DETACH),
    )
