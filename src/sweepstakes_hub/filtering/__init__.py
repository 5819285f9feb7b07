"""Competition filtering: one criteria definition, two interpreters (SQL pushdown and in-memory)."""

from .criteria import EndsOnOrBefore, FieldEquals, PrizeBetween, TextContains, parse_prize
from .evaluator import FilterEvaluator
from .spec import FilterSpec

__all__ = [
    "FilterSpec",
    "FilterEvaluator",
    "FieldEquals",
    "TextContains",
    "EndsOnOrBefore",
    "PrizeBetween",
    "parse_prize",
]
