from __future__ import annotations


class CheckError(Exception):
    """Base class for every failure that ends the check as UNKNOWN."""


class ValidationError(CheckError):
    """Missing or malformed input: command-line flags, thresholds, numbers."""


class AuthError(CheckError):
    """The New Relic API rejected the credential."""


class TransportError(CheckError):
    """The HTTP call could not complete or returned an unexpected status."""


class ParseError(CheckError):
    """The response body does not match the accounts/applications schema."""


class MetricLookupError(CheckError, LookupError):
    """Application or metric name absent from the fetched metrics table."""
