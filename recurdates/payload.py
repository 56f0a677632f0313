# payload.py
"""
Host payload -> RecurrenceRule, and the expansion result back to the host shape.

Public API:
  - RulePayload (pydantic model of the host contract)
  - rule_from_mapping(data) -> RecurrenceRule | raises PayloadError
  - calculate_occurrences(payload, range_start, range_end) -> {"dates": [...]}

Notes:
- Field names follow the snake_case contract; the camelCase spellings sent by
  the web frontend are accepted as aliases.
- A null value counts as absent, so {"start_date": ..., "startDate": null}
  keeps the non-null spelling.
- Any decoding problem yields {"dates": []}, same as a malformed date.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, model_validator

from .engine import expand
from .rule import QueryWindow, RecurrenceRule

logger = logging.getLogger(__name__)

Weekday = Annotated[StrictInt, Field(ge=0, le=6)]


class PayloadError(ValueError):
    pass


class RulePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    frequency: StrictStr
    interval: StrictInt = Field(ge=0)
    start_date: StrictStr = Field(alias="startDate")
    end_date: Optional[StrictStr] = Field(default=None, alias="endDate")
    max_occurrences: Optional[StrictInt] = Field(default=None, ge=0, alias="maxOccurrences")
    excluded_dates: List[StrictStr] = Field(default_factory=list, alias="excludedDates")
    days_of_week: List[Weekday] = Field(default_factory=list, alias="daysOfWeek")
    day_of_month: Optional[StrictInt] = Field(default=None, ge=1, le=31, alias="dayOfMonth")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        values = {k: v for k, v in data.items() if v is not None}
        for name, info in cls.model_fields.items():
            alias = info.alias
            if alias and name in values and alias in values and values[name] != values[alias]:
                raise ValueError(f"conflicting values for {name} and {alias}")
        return values

    def to_rule(self) -> RecurrenceRule:
        return RecurrenceRule(
            frequency=self.frequency,
            interval=self.interval,
            start_date=self.start_date,
            end_date=self.end_date,
            max_occurrences=self.max_occurrences,
            excluded_dates=frozenset(self.excluded_dates),
            days_of_week=frozenset(self.days_of_week),
            day_of_month=self.day_of_month,
        )


def rule_from_mapping(data: Mapping[str, Any]) -> RecurrenceRule:
    try:
        return RulePayload.model_validate(data).to_rule()
    except ValidationError as e:
        raise PayloadError(str(e)) from e


def calculate_occurrences(
    payload: Union[str, bytes, Mapping[str, Any]],
    range_start: str,
    range_end: str,
) -> Dict[str, List[str]]:
    try:
        data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
        rule = rule_from_mapping(data)
    except ValueError as e:  # JSONDecodeError, UnicodeDecodeError, PayloadError
        logger.warning("Rejected recurrence payload: %s", e)
        return {"dates": []}

    return {"dates": expand(rule, QueryWindow(range_start, range_end))}
