"""Interactive prompt provider for branchflow.

The init workflow and config loading talk to the user only through a
Prompter. ClickPrompter is the terminal implementation; tests script their
answers with a fake.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional, Protocol, runtime_checkable

import click

from branchflow.exceptions import InputValidationError

Validator = Callable[[str], Any]


@runtime_checkable
class Prompter(Protocol):
    def confirm(self, message: str, default: bool = False) -> bool: ...

    def ask(
        self, message: str, default: str | None = None, validate: Validator | None = None
    ) -> str: ...


@dataclass(frozen=True)
class Question:
    """One wizard question.

    ``when`` receives the answers collected so far; the question is skipped
    when it returns False.
    """

    name: str
    message: str
    kind: Literal["confirm", "text"] = "text"
    default: Any = None
    validate: Optional[Validator] = None
    when: Optional[Callable[[Mapping[str, Any]], bool]] = None


def ask_questions(prompter: Prompter, questions: list[Question]) -> dict[str, Any]:
    """Ask *questions* in order and return ``{question.name: answer}``."""
    answers: dict[str, Any] = {}
    for question in questions:
        if question.when is not None and not question.when(answers):
            continue
        if question.kind == "confirm":
            answers[question.name] = prompter.confirm(
                question.message, default=bool(question.default)
            )
        else:
            answers[question.name] = prompter.ask(
                question.message, default=question.default, validate=question.validate
            )
    return answers


class ClickPrompter:
    """Prompter backed by ``click.confirm`` / ``click.prompt``."""

    def confirm(self, message: str, default: bool = False) -> bool:
        return click.confirm(message, default=default)

    def ask(
        self, message: str, default: str | None = None, validate: Validator | None = None
    ) -> str:
        def _proc(value: str) -> str:
            if validate is not None:
                try:
                    validate(value)
                except InputValidationError as exc:
                    # click re-prompts on BadParameter
                    raise click.BadParameter(str(exc)) from None
            return value

        return click.prompt(message, default=default, value_proc=_proc)
