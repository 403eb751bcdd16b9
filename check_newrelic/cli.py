from __future__ import annotations

import argparse
import logging
import math
import sys
from dataclasses import dataclass
from typing import List, NoReturn, Optional, Sequence

from pydantic import ValidationError as SettingsError

from check_newrelic.core.config import Settings, get_settings
from check_newrelic.core.exceptions import CheckError, MetricLookupError, ValidationError
from check_newrelic.core.logging_config import configure_logging
from check_newrelic.services.metric_catalog import METRIC_SELECTORS, MetricDescriptor, get_descriptor
from check_newrelic.services.newrelic_client import NewRelicClient
from check_newrelic.services.normalization import normalize
from check_newrelic.services.status import StatusResult, evaluate, perf_data, unknown


LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricRequest:
    application_name: str
    metric_key: str
    api_key: str
    warning_threshold: str
    critical_threshold: str
    timeout: float


class _ArgumentParser(argparse.ArgumentParser):
    # argparse exits 2 on bad input, which a supervisor would read as CRITICAL
    def error(self, message: str) -> NoReturn:
        raise ValidationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="check_newrelic",
        description="Nagios check for a New Relic application metric",
    )
    parser.add_argument("-w", "--warning", default="0", help="Warning threshold (default 0)")
    parser.add_argument("-c", "--critical", default="0", help="Critical threshold (default 0)")
    parser.add_argument("-a", "--app", help="Application name as shown in New Relic")
    parser.add_argument(
        "-m",
        "--metric",
        metavar="{" + "|".join(METRIC_SELECTORS) + "}",
        help="Metric to check (case-insensitive)",
    )
    parser.add_argument("-k", "--api-key", help="New Relic API key (or NEWRELIC_API_KEY)")
    parser.add_argument("-t", "--timeout", type=float, help="HTTP timeout in seconds")
    parser.add_argument("-d", "--debug", action="store_true", help="Log diagnostics to stderr")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _mask(secret: str | None) -> str:
    if not secret:
        return "-"
    return f"{secret[:4]}..." if len(secret) > 8 else "****"


def build_request(args: argparse.Namespace, settings: Settings) -> MetricRequest:
    """Merge flags with environment fallbacks and check nothing is missing."""
    if args.metric is not None:
        get_descriptor(args.metric)

    values = {
        "application_name": args.app or settings.NEWRELIC_APP_NAME,
        "metric": args.metric,
        "api_key": args.api_key or settings.NEWRELIC_API_KEY,
    }
    for name, value in values.items():
        if not value:
            raise ValidationError(f"Unspecified argument for {name}")

    timeout = args.timeout if args.timeout is not None else settings.HTTP_TIMEOUT_SEC
    if not (math.isfinite(timeout) and timeout > 0):
        raise ValidationError("Invalid argument for --timeout")

    request = MetricRequest(
        application_name=values["application_name"],
        metric_key=values["metric"],
        api_key=values["api_key"],
        warning_threshold=args.warning,
        critical_threshold=args.critical,
        timeout=timeout,
    )
    LOG.debug(
        "warning_threshold=%s critical_threshold=%s application_name=%s metric=%s api_key=%s",
        request.warning_threshold,
        request.critical_threshold,
        request.application_name,
        request.metric_key,
        _mask(request.api_key),
    )
    return request


def check(request: MetricRequest, client: NewRelicClient) -> StatusResult:
    """Fetch the metric named by ``request`` and grade it against its thresholds."""
    descriptor: MetricDescriptor = get_descriptor(request.metric_key)
    warning = normalize(request.warning_threshold, descriptor.data_type, "warning threshold")
    critical = normalize(request.critical_threshold, descriptor.data_type, "critical threshold")

    metrics = client.fetch_metrics(request.api_key)

    samples = metrics.get(request.application_name)
    if samples is None:
        raise MetricLookupError("Invalid application name for --app")
    sample = samples.get(descriptor.display_name)
    if sample is None:
        raise MetricLookupError(
            f"Metric {descriptor.display_name} not reported for application {request.application_name}"
        )

    measured = normalize(sample.raw_value, descriptor.data_type, descriptor.display_name)
    label = f"{request.application_name}_{descriptor.display_name}"
    perf = perf_data(label, sample.raw_value, request.warning_threshold, request.critical_threshold)
    LOG.debug("measured=%d warning=%d critical=%d perf_data=%s", measured, warning, critical, perf)

    return evaluate(
        measured,
        warning,
        critical,
        sample.formatted_value,
        descriptor.display_name,
        perf,
        warning_text=request.warning_threshold,
        critical_text=request.critical_threshold,
    )


def _config_errors(exc: SettingsError) -> str:
    fields = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
    return f"Invalid configuration: {', '.join(fields) or exc.title}"


def run(
    argv: Optional[Sequence[str]] = None,
    client: Optional[NewRelicClient] = None,
    settings: Optional[Settings] = None,
    setup_logging: bool = False,
) -> StatusResult:
    """Evaluate one invocation without printing or exiting.

    Every expected failure, bad flags and bad environment included, comes
    back as an UNKNOWN result.
    """
    try:
        args = parse_args(argv)
        settings = settings or get_settings()
        if setup_logging:
            configure_logging(settings.LOG_LEVEL, debug=args.debug)
        request = build_request(args, settings)
        if client is None:
            client = NewRelicClient(
                settings.NEWRELIC_BASE_URL,
                timeout=request.timeout,
                verify_ssl=settings.VERIFY_SSL,
                api_key_header=settings.NEWRELIC_API_KEY_HEADER,
            )
        return check(request, client)
    except CheckError as exc:
        LOG.info("check failed: %s: %s", type(exc).__name__, exc)
        return unknown(str(exc))
    except SettingsError as exc:
        return unknown(_config_errors(exc))


def main(argv: Optional[List[str]] = None) -> NoReturn:
    result = run(argv, setup_logging=True)
    print(result.line)
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
