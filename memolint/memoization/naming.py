# Naming policy for memoized instance variables: which variable names are
# acceptable for a given method name under the configured underscore style.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

MSG = (
    "Memoized variable `{var}` does not match method name `{method}`. "
    "Use `@{suggested_var}` instead."
)
UNDERSCORE_REQUIRED = (
    "Memoized variable `{var}` does not start with `_`. "
    "Use `@{suggested_var}` instead."
)

INITIALIZER_NAME = "initialize"


class Style(str, Enum):
    """Leading-underscore convention for memoized variable names."""

    DISALLOWED = "disallowed"
    REQUIRED = "required"
    OPTIONAL = "optional"


def normalize_method_name(method_name: str) -> str:
    """Drop `!` and `?` so `foo!`, `foo?` and `foo` share naming rules."""
    return method_name.replace("!", "").replace("?", "")


def bare_variable_name(variable: str) -> str:
    """`@foo` -> `foo`."""
    return variable.replace("@", "", 1)


@dataclass(frozen=True)
class NamingPolicy:
    """
    Candidate generation and matching for one style.

    The policy is immutable; the same (style, method name) pair always gives
    the same candidates.
    """

    style: Style = Style.DISALLOWED

    def __post_init__(self) -> None:
        # Accept plain strings; an unknown value raises ValueError here.
        object.__setattr__(self, "style", Style(self.style))

    def candidates(self, method_name: str) -> tuple[str, ...]:
        """
        Bare variable names accepted for method_name, in order, without
        duplicates.

        Under REQUIRED a method already starting with `_` accepts both its own
        name and the doubled prefix (`_foo` -> `__foo`, `_foo`).
        """
        base = normalize_method_name(method_name)
        with_underscore = f"_{base}"
        stripped = base[1:] if base.startswith("_") else base

        if self.style is Style.REQUIRED:
            names = [with_underscore]
            if base.startswith("_"):
                names.append(base)
        elif self.style is Style.DISALLOWED:
            names = [base, stripped]
        elif self.style is Style.OPTIONAL:
            names = [base, with_underscore, stripped]
        else:
            raise ValueError(f"Unknown style: {self.style!r}")
        return tuple(dict.fromkeys(names))

    def suggested(self, method_name: str) -> str:
        """Bare variable name to recommend for method_name."""
        base = normalize_method_name(method_name)
        return f"_{base}" if self.style is Style.REQUIRED else base

    def matches(self, method_name: str, variable_name: Optional[str]) -> bool:
        """
        True if variable_name (with or without `@`) is acceptable for the method.

        Initializers and a missing variable always match.
        """
        if variable_name is None or method_name == INITIALIZER_NAME:
            return True
        return bare_variable_name(variable_name) in self.candidates(method_name)

    def message(self, variable_name: str, method_name: str) -> str:
        """Offense message for variable_name (`@x`) inside method_name."""
        template = MSG
        if self.style is Style.REQUIRED and not bare_variable_name(variable_name).startswith("_"):
            template = UNDERSCORE_REQUIRED
        return template.format(
            var=variable_name,
            method=method_name,
            suggested_var=self.suggested(method_name),
        )
