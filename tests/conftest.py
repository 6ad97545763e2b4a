import os
import sys
from datetime import datetime, timezone

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from api.responses import AlertRecord


def make_alert(triggered_at, **overrides) -> AlertRecord:
    data = {
        "triggered_at": triggered_at,
        "source": "coralogix",
        "priority": "p2",
        "severity": "warning",
        "alert_name": "alert",
        "message": "",
    }
    data.update(overrides)
    return AlertRecord.model_validate(data)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeProvider:
    """In-memory stand-in for DataSourceProvider honouring the alert window bounds."""

    def __init__(self, alerts=None, rules=None, hourly=None, daily=None, latest=None):
        self.alerts = list(alerts or [])
        self.rules = list(rules or [])
        self.hourly = list(hourly or [])
        self.daily = list(daily or [])
        self.latest = latest
        self.alert_calls = []
        self.alert_limits = []
        self.summarizer = None

    async def fetch_alerts(self, start=None, end=None, filters=None, limit=None):
        self.alert_calls.append((start, end))
        self.alert_limits.append(limit)
        rows = sorted(
            (a for a in self.alerts
             if (start is None or a.triggered_at >= start) and (end is None or a.triggered_at <= end)),
            key=lambda a: a.triggered_at,
            reverse=True,
        )
        return rows[:limit] if limit else rows

    async def fetch_alert_metric_map(self, domain=None):
        return [r for r in self.rules if domain is None or r.domain == domain]

    async def fetch_hourly_metrics(self, day, cohort=None):
        return [r for r in self.hourly if r.get("dt") == day.isoformat()]

    async def fetch_daily_metrics(self, start, end):
        return [r for r in self.daily if start.isoformat() <= r.get("dt") <= end.isoformat()]

    async def fetch_latest_date(self):
        return self.latest


@pytest.fixture
def fake_provider():
    return FakeProvider()


# Prevent pytest from attempting to collect any modules inside the engine
# package itself; collection stays focused on the tests directory.

def pytest_ignore_collect(collection_path, config):
    text = str(collection_path)
    if os.path.sep + 'engine' + os.path.sep in text:
        return True
    return None
