"""Typed failures raised while rendering Risma templates."""

from __future__ import annotations


class RismaError(Exception):
    """Base class for every Risma failure."""


class UndefinedVariable(RismaError, KeyError):
    """The head of a chain names a variable that was not supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable '{name}' is undefined")

    def __str__(self) -> str:
        return self.args[0]


class FunctionNotFound(RismaError, LookupError):
    """No resolver tier knows the requested function name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function or method '{name}' not found")


class ArgumentParseError(RismaError, ValueError):
    """The argument list of a call is not a list of literals."""

    def __init__(self, function: str, detail: str = ""):
        self.function = function
        message = f"Error parsing arguments for '{function}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidTokenSyntax(RismaError, ValueError):
    """A chain token does not have the ``name`` or ``name(args)`` shape."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid syntax: {token}")


class InvocationError(RismaError):
    """A resolved function raised while being called."""

    def __init__(self, function: str, exc: BaseException):
        self.function = function
        super().__init__(f"Function '{function}' failed: {exc}")


class NestingTooDeep(RismaError):
    """Nested placeholders exceeded the configured depth."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Nested placeholders exceed maximum depth of {max_depth}")
