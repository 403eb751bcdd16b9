from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Any:
    # The API sends numbers either as JSON numbers or as strings
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class MetricSample(BaseModel):
    """One ``threshold_value`` entry of an application's health summary."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    formatted_value: str = Field(..., alias="formatted_metric_value")
    raw_value: str = Field(..., alias="metric_value")

    @field_validator("formatted_value", "raw_value", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _as_text(value)


class Application(BaseModel):
    id: int | None = None
    name: str
    threshold_values: List[MetricSample] = Field(default_factory=list)


class Account(BaseModel):
    id: int | None = None
    name: str | None = None
    applications: List[Application] = Field(default_factory=list)


class AccountsResponse(BaseModel):
    accounts: List[Account] = Field(..., min_length=1)


class ApplicationsResponse(BaseModel):
    applications: List[Application] = Field(default_factory=list)


# application name -> metric display name -> sample
MetricsTable = Dict[str, Dict[str, MetricSample]]
