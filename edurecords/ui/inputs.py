"""
Validated console input.

Every read returns an ``InputResult``: a value, a cancellation (the operator
typed the escape word or input ended) or, from the parsers, a retry request
with a message. ``InputReader`` re-prompts on retries, so menus only ever see
a value or a cancellation.
"""

import sys
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Optional, TextIO

from ..core.enums import DATE_FORMAT, MAX_TASK_DAYS


class InputOutcome(Enum):
    VALUE = "value"
    CANCEL = "cancel"
    RETRY = "retry"


@dataclass
class InputResult:
    outcome: InputOutcome
    value: Any = None
    message: str = ""

    @property
    def cancelled(self) -> bool:
        return self.outcome is InputOutcome.CANCEL

    @classmethod
    def of(cls, value: Any) -> "InputResult":
        return cls(InputOutcome.VALUE, value)

    @classmethod
    def cancel(cls) -> "InputResult":
        return cls(InputOutcome.CANCEL)

    @classmethod
    def retry(cls, message: str) -> "InputResult":
        return cls(InputOutcome.RETRY, message=message)


def parse_int(raw: str) -> InputResult:
    try:
        return InputResult.of(int(raw))
    except ValueError:
        return InputResult.retry("Invalid number format. Please enter a whole number.")


def parse_string(raw: str) -> InputResult:
    if not raw:
        return InputResult.retry("Input cannot be empty. Please try again.")
    return InputResult.of(raw)


def parse_confirmation(raw: str) -> InputResult:
    answer = raw.lower()
    if answer in ("y", "yes"):
        return InputResult.of(True)
    if answer in ("n", "no"):
        return InputResult.of(False)
    return InputResult.retry("Invalid response. Please enter 'y' or 'n'.")


def parse_deadline(raw: str, today: date) -> InputResult:
    """Parse DD/MM/YYYY and accept only dates after today and within 90 days."""
    try:
        deadline = datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        return InputResult.retry("Invalid format. Please enter the date as DD/MM/YYYY.")
    days_until = (deadline - today).days
    if days_until <= 0 or days_until > MAX_TASK_DAYS:
        return InputResult.retry(
            f"Date must be in the future and within {MAX_TASK_DAYS} days from today."
        )
    return InputResult.of(deadline)


class InputReader:
    """Prompts on an output stream and reads answers from an input stream."""

    def __init__(self, input_stream: Optional[TextIO] = None,
                 output_stream: Optional[TextIO] = None,
                 escape_word: str = "menu",
                 today: Callable[[], date] = date.today):
        self._in = input_stream if input_stream is not None else sys.stdin
        self._out = output_stream if output_stream is not None else sys.stdout
        self._escape_word = escape_word.casefold()
        self._today = today
        self._at_end = False

    @property
    def escape_word(self) -> str:
        return self._escape_word

    @property
    def at_end(self) -> bool:
        """True once the input stream has been exhausted."""
        return self._at_end

    def write(self, text: str = "") -> None:
        print(text, file=self._out)

    def _ask(self, prompt: str, parser: Callable[[str], InputResult]) -> InputResult:
        while True:
            self._out.write(prompt + " ")
            self._out.flush()
            line = self._in.readline()
            if not line:
                self._at_end = True
                return InputResult.cancel()
            raw = line.strip()
            if raw.casefold() == self._escape_word:
                return InputResult.cancel()
            result = parser(raw)
            if result.outcome is InputOutcome.RETRY:
                self.write(result.message)
                continue
            return result

    def read_int(self, prompt: str) -> InputResult:
        return self._ask(prompt, parse_int)

    def read_string(self, prompt: str) -> InputResult:
        return self._ask(prompt, parse_string)

    def confirm(self, prompt: str) -> InputResult:
        return self._ask(f"{prompt} (y/n):", parse_confirmation)

    def read_valid_date(self, prompt: str) -> InputResult:
        return self._ask(f"{prompt} (DD/MM/YYYY):", lambda raw: parse_deadline(raw, self._today()))
