from .caldate import InvalidDateFormat
from .engine import expand, expand_strict, validate
from .en import parse_rule
from .payload import PayloadError, RulePayload, calculate_occurrences, rule_from_mapping
from .rrule_export import to_rrule, to_rrule_string, to_rruleset
from .rule import DAILY, MONTHLY, WEEKLY, YEARLY, QueryWindow, RecurrenceRule

__all__ = [
    "DAILY",
    "WEEKLY",
    "MONTHLY",
    "YEARLY",
    "InvalidDateFormat",
    "PayloadError",
    "QueryWindow",
    "RecurrenceRule",
    "RulePayload",
    "calculate_occurrences",
    "expand",
    "expand_strict",
    "parse_rule",
    "rule_from_mapping",
    "to_rrule",
    "to_rrule_string",
    "to_rruleset",
    "validate",
]
