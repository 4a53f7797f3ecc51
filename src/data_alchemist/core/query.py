"""Turn a free-text search string into structured FilterConditions.

The grammar is a fixed, ordered list of matchers. Each matcher looks for its
first occurrence anywhere in the text and contributes at most one condition,
so ``"A > 1 and B > 2"`` yields only ``A > 1``. Conditions are returned in
matcher order, not in the order they appear in the text.

    <field> > <integer>
    <field> < <integer>
    <field> = <word>
    <field> contains <token | "quoted phrase" | 'quoted phrase'>
    <field> between <integer> and <integer>
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from data_alchemist.core.models import ConditionValue, FilterCondition, Operator

_log = logging.getLogger(__name__)

_FIELD = r"(?P<field>\w+)"
_FLAGS = re.IGNORECASE | re.ASCII


@dataclass(frozen=True)
class _Matcher:
    operator: Operator
    pattern: re.Pattern
    build_value: Callable[[re.Match], ConditionValue]

    def match(self, text: str) -> FilterCondition | None:
        m = self.pattern.search(text)
        if m is None:
            return None
        try:
            value = self.build_value(m)
        except ValueError:
            # Digit run too long to become an int; the shape contributes nothing.
            _log.debug(
                "Ignoring %s condition on %s: value too large",
                self.operator.value,
                m.group("field"),
            )
            return None
        return FilterCondition(field=m.group("field"), operator=self.operator, value=value)


def _contains_value(m: re.Match) -> str:
    for group in ("dq", "sq", "word"):
        if m.group(group) is not None:
            return m.group(group)
    return ""


MATCHERS: tuple[_Matcher, ...] = (
    _Matcher(
        Operator.GT,
        re.compile(_FIELD + r"\s*>\s*(?P<n>\d+)", _FLAGS),
        lambda m: int(m.group("n")),
    ),
    _Matcher(
        Operator.LT,
        re.compile(_FIELD + r"\s*<\s*(?P<n>\d+)", _FLAGS),
        lambda m: int(m.group("n")),
    ),
    _Matcher(
        Operator.EQ,
        re.compile(_FIELD + r"\s*=\s*(?P<word>\w+)", _FLAGS),
        lambda m: m.group("word"),
    ),
    _Matcher(
        Operator.CONTAINS,
        re.compile(
            _FIELD + r"""\s+contains\s+(?:"(?P<dq>[^"]+)"|'(?P<sq>[^']+)'|(?P<word>[^\s"']+))""",
            _FLAGS,
        ),
        _contains_value,
    ),
    _Matcher(
        Operator.BETWEEN,
        re.compile(_FIELD + r"\s+between\s+(?P<lo>\d+)\s+and\s+(?P<hi>\d+)", _FLAGS),
        # Kept as written; a reversed range simply matches nothing.
        lambda m: (int(m.group("lo")), int(m.group("hi"))),
    ),
)


def parse_query(text: str) -> list[FilterCondition]:
    """Return the structured conditions found in *text*, possibly none.

    An empty list means "no structured filter"; see ``filters.search`` for
    the substring fallback.
    """
    conditions: list[FilterCondition] = []
    for matcher in MATCHERS:
        condition = matcher.match(text)
        if condition is not None:
            conditions.append(condition)
    return conditions
