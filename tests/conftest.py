"""Shared fixtures: canned New Relic payloads and a client on a mock transport."""

import logging
from typing import Any, Callable, Dict, List

import httpx
import pytest

from check_newrelic.core.config import Settings
from check_newrelic.services.newrelic_client import NewRelicClient


def threshold_value(name: str, metric_value: Any, formatted: str | None = None) -> Dict[str, Any]:
    return {
        "name": name,
        "metric_value": metric_value,
        "formatted_metric_value": formatted if formatted is not None else str(metric_value),
    }


def accounts_payload(applications: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"accounts": [{"id": 1, "name": "Acme", "applications": applications}]}


@pytest.fixture
def payload() -> Dict[str, Any]:
    """Account with two applications reporting the usual health metrics."""
    return accounts_payload(
        [
            {
                "id": 10,
                "name": "My App",
                "threshold_values": [
                    threshold_value("CPU", "12.345", "12.3 %"),
                    threshold_value("Memory", "512.5", "512 MB"),
                    threshold_value("Errors", "0.02", "0.02 %"),
                    threshold_value("Response Time", "250", "250 ms"),
                    threshold_value("Throughput", "1200.0", "1,200 rpm"),
                ],
            },
            {
                "id": 11,
                "name": "Billing",
                "threshold_values": [threshold_value("CPU", "3.0", "3 %")],
            },
        ]
    )


@pytest.fixture
def requests_seen() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(requests_seen) -> Callable[..., NewRelicClient]:
    """Build a client whose transport answers every request with ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> NewRelicClient:
        def _record(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        return NewRelicClient("https://rpm.example.test", transport=httpx.MockTransport(_record))

    return _make


@pytest.fixture
def json_client(make_client, payload) -> NewRelicClient:
    return make_client(lambda request: httpx.Response(200, json=payload))


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(_env_file=None, NEWRELIC_API_KEY=None, NEWRELIC_APP_NAME=None)


@pytest.fixture(autouse=True)
def _restore_logging():
    """main() reconfigures logging; put the root and httpx loggers back afterwards."""
    loggers = [logging.getLogger(name) for name in ("", "httpx", "httpcore")]
    saved = [(lg, lg.handlers[:], lg.level, lg.propagate) for lg in loggers]
    yield
    for lg, handlers, level, propagate in saved:
        lg.handlers[:] = handlers
        lg.setLevel(level)
        lg.propagate = propagate
