import os
import sys
from datetime import date, timedelta

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from engine.indicator import Submission


def weekly(values, start=date(2024, 1, 1), prefix="s"):
    """Submissions one week apart carrying ``values`` in order."""
    return [
        Submission(id=f"{prefix}{i}", reported_at=start + timedelta(days=7 * i), value=str(v))
        for i, v in enumerate(values)
    ]


@pytest.fixture
def make_weekly():
    return weekly


@pytest.fixture(autouse=True)
def reset_providers():
    import api.routes.common as common

    common._providers.clear()
    yield
    common._providers.clear()


# Prevent pytest from attempting to collect any modules inside the engine
# package itself.

def pytest_ignore_collect(collection_path, config):
    text = str(collection_path)
    if os.path.sep + 'engine' + os.path.sep in text:
        return True
