"""Custom delimiter directives.

An expression may declare its own delimiters ahead of the operands::

    //;\\n1;2;3
    //[***][%]\\n1***2%3

``\\n`` here is the two-character escape token typed at the console, not a real
line break. Custom delimiters are always used together with the defaults.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Sequence

from string_calculator.services.calculator_errors import InvalidExpressionError

CUSTOM_DELIMITER_PREFIX = "//"
DIRECTIVE_TERMINATOR = "\\n"
DEFAULT_DELIMITERS: tuple[str, ...] = (",", DIRECTIVE_TERMINATOR)
DEFAULT_PATTERN_TIMEOUT_SEC = 5.0

_BRACKETED_PREFIX = CUSTOM_DELIMITER_PREFIX + "["
_GROUP_SEPARATOR = "]["
_BRACKETED_END = "]" + DIRECTIVE_TERMINATOR


@dataclass(frozen=True)
class ResolvedExpression:
    delimiters: tuple[str, ...]
    payload: str


class _Deadline:
    def __init__(self, expression: str, timeout: float) -> None:
        self._expression = expression
        self._expires_at = time.monotonic() + timeout

    def check(self) -> None:
        if time.monotonic() > self._expires_at:
            raise InvalidExpressionError(self._expression)


def resolve_delimiters(
    expression: str,
    defaults: Sequence[str] = DEFAULT_DELIMITERS,
    *,
    timeout: float = DEFAULT_PATTERN_TIMEOUT_SEC,
) -> ResolvedExpression:
    """Split ``expression`` into its effective delimiters and the payload to tokenize.

    Raises ``InvalidExpressionError`` when the expression starts with ``//`` but
    the directive matches neither the single-character nor the bracketed form.
    """

    defaults = tuple(defaults)
    if not expression.startswith(CUSTOM_DELIMITER_PREFIX):
        return ResolvedExpression(delimiters=defaults, payload=expression)

    deadline = _Deadline(expression, timeout)
    match = _match_single(expression)
    if match is None:
        match = _match_bracketed(expression, deadline)
    if match is None:
        raise InvalidExpressionError(expression)

    custom, payload = match
    return ResolvedExpression(delimiters=custom + defaults, payload=payload)


def _match_single(expression: str) -> tuple[tuple[str, ...], str] | None:
    # //<d>\n<payload>
    terminator_at = len(CUSTOM_DELIMITER_PREFIX) + 1
    delimiter = expression[len(CUSTOM_DELIMITER_PREFIX) : terminator_at]
    if not delimiter or delimiter == "\n":
        return None
    if not expression.startswith(DIRECTIVE_TERMINATOR, terminator_at):
        return None
    payload = _single_line(expression[terminator_at + len(DIRECTIVE_TERMINATOR) :])
    if payload is None:
        return None
    return (delimiter,), payload


def _match_bracketed(expression: str, deadline: _Deadline) -> tuple[tuple[str, ...], str] | None:
    # //[<d1>][<d2>]...\n<payload>
    if not expression.startswith(_BRACKETED_PREFIX):
        return None

    # The directive closes at the first "]\n" behind a non-empty group.
    body_start = len(_BRACKETED_PREFIX)
    body_end = expression.find(_BRACKETED_END, body_start + 1)
    if body_end < 0:
        return None

    body = expression[body_start:body_end]
    if "\n" in body:
        return None

    groups: list[str] = []
    start = 0
    while True:
        deadline.check()
        split_at = body.find(_GROUP_SEPARATOR, start + 1)
        # Only split where both sides keep at least one character.
        if split_at < 0 or split_at + len(_GROUP_SEPARATOR) >= len(body):
            groups.append(body[start:])
            break
        groups.append(body[start:split_at])
        start = split_at + len(_GROUP_SEPARATOR)

    payload = _single_line(expression[body_end + len(_BRACKETED_END) :])
    if payload is None:
        return None
    return tuple(groups), payload


def _single_line(payload: str) -> str | None:
    # A directive payload is one line; a single trailing line break is dropped.
    if payload.endswith("\n"):
        payload = payload[:-1]
    if "\n" in payload:
        return None
    return payload
