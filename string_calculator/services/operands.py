from __future__ import annotations

import re
from decimal import Decimal
from functools import lru_cache
from typing import Sequence

# Plain decimal notation only: no exponents, NaN or Infinity.
_NUMBER_PATTERN = re.compile(r"^\s*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)\s*$")

ZERO = Decimal(0)


@lru_cache(maxsize=64)
def _delimiter_pattern(delimiters: tuple[str, ...]) -> re.Pattern[str]:
    # Alternation keeps the tuple order, so earlier delimiters win on overlap.
    return re.compile("|".join(re.escape(delimiter) for delimiter in delimiters))


def split_operands(payload: str, delimiters: Sequence[str]) -> list[str]:
    """Split ``payload`` on any of ``delimiters``, keeping empty segments."""

    if not delimiters:
        return [payload]
    return _delimiter_pattern(tuple(delimiters)).split(payload)


def evaluate_operand(token: str, max_value: Decimal | None = None) -> Decimal:
    """Coerce a token to a decimal.

    Unparsable tokens and values above ``max_value`` become zero. Negative
    values are returned as-is.
    """

    if not _NUMBER_PATTERN.match(token):
        return ZERO
    value = Decimal(token.strip())
    if max_value is not None and value > max_value:
        return ZERO
    return value


def tokenize_and_evaluate(
    payload: str,
    delimiters: Sequence[str],
    max_value: Decimal | None = None,
) -> list[Decimal]:
    return [evaluate_operand(token, max_value) for token in split_operands(payload, delimiters)]
