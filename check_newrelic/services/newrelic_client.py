from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from check_newrelic.core.exceptions import AuthError, ParseError, TransportError
from check_newrelic.schemas.newrelic import (
    Account,
    AccountsResponse,
    Application,
    ApplicationsResponse,
    MetricSample,
    MetricsTable,
)


LOG = logging.getLogger(__name__)

# New Relic answers a bad license key with a 500 rather than a 4xx
AUTH_FAILURE_STATUSES = frozenset({401, 403, 500})


class NewRelicClient:
    """Thin wrapper over the New Relic v1 REST API.

    One request per call, no retries and no caching. The API key is passed
    to each call and sent as a header; the client keeps no credential.
    """

    def __init__(
        self,
        base_url: str = "https://rpm.newrelic.com",
        *,
        timeout: float = 10.0,
        verify_ssl: bool = True,
        api_key_header: str = "x-license-key",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.api_key_header = api_key_header
        self._transport = transport

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            self.api_key_header: api_key,
            "Accept": "application/json",
        }

    def _get(self, path: str, api_key: str, params: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(
                verify=self.verify_ssl, timeout=self.timeout, transport=self._transport
            ) as client:
                resp = client.get(url, params=params, headers=self._headers(api_key))
        except httpx.HTTPError as exc:
            LOG.info("newrelic: request error url=%s err=%s", url, exc)
            raise TransportError(f"NewRelic API request failed: {exc}") from exc

        LOG.debug("newrelic: GET %s -> %s", url, resp.status_code)
        if resp.status_code in AUTH_FAILURE_STATUSES:
            raise AuthError("Invalid NewRelic API key")
        if not resp.is_success:
            raise TransportError(f"NewRelic API returned HTTP {resp.status_code}")
        try:
            body = resp.json()
        except ValueError as exc:
            raise ParseError("NewRelic API returned a non-JSON body") from exc
        LOG.debug("newrelic: API query results: %r", body)
        return body

    @staticmethod
    def _validate(model: type[BaseModel], body: Any) -> Any:
        try:
            return model.model_validate(body)
        except SchemaError as exc:
            LOG.debug("newrelic: schema mismatch err=%s", exc)
            raise ParseError(
                f"Unexpected NewRelic API response ({exc.error_count()} schema errors)"
            ) from exc

    @staticmethod
    def parse_metrics(response: AccountsResponse) -> MetricsTable:
        """Reshape the first account into application -> metric -> sample.

        A metric name repeated within one application keeps its last entry, as
        does an application name repeated within the account.
        """
        metrics: MetricsTable = {}
        for application in response.accounts[0].applications:
            samples: Dict[str, MetricSample] = {}
            metrics[application.name] = samples
            for sample in application.threshold_values:
                samples[sample.name] = sample
        return metrics

    def fetch_metrics(self, api_key: str) -> MetricsTable:
        """Return the current health summary of every application."""
        body = self._get("/accounts.json", api_key, params={"include": "application_health"})
        metrics = self.parse_metrics(self._validate(AccountsResponse, body))
        LOG.debug("newrelic: parsed results: %r", metrics)
        return metrics

    def fetch_account(self, api_key: str) -> Account:
        body = self._get("/accounts.json", api_key)
        return self._validate(AccountsResponse, body).accounts[0]

    def fetch_applications(self, api_key: str, account_id: int) -> List[Application]:
        body = self._get(f"/accounts/{account_id}/applications.json", api_key)
        return self._validate(ApplicationsResponse, body).applications
