"""Rendering engine for Risma templates."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .errors import InvalidTokenSyntax, InvocationError, NestingTooDeep, RismaError, UndefinedVariable
from .helpers import GLOBAL_FUNCTIONS, stringify
from .parser import DIRECT_CALL, PLACEHOLDER, Tag, Token, find_tags, parse_arguments, parse_token, split_chain
from .registry import DEFAULT_FUNCTIONS, ClassRegistry, FunctionTable, mapping_resolver
from .registry import resolve as resolve_function

logger = logging.getLogger(__name__)


def _env_int(name: str, fallback: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value >= 0 else fallback


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


DEFAULT_MAX_DEPTH = _env_int("RISMA_MAX_DEPTH", 32)
DEFAULT_STRICT = _env_flag("RISMA_STRICT")


class Engine:
    """
    Isolated rendering engine.

    Each engine owns its function table and class registry. Rendering only
    reads them, so an engine can be shared between renders as long as
    registration does not run concurrently with rendering.
    """

    def __init__(
        self,
        default: Optional[bool] = None,
        max_depth: Optional[int] = None,
        global_functions: Optional[Mapping[str, Callable]] = None,
    ):
        """
        Args:
            default: Render unresolvable tags as empty strings instead of raising
            max_depth: Maximum nesting depth of placeholders inside arguments
            global_functions: Last resolver tier (default: ``risma.helpers``)
        """
        self._functions = FunctionTable()
        self._classes = ClassRegistry()
        self._globals: Dict[str, Callable] = dict(
            GLOBAL_FUNCTIONS if global_functions is None else global_functions
        )
        self._default = (not DEFAULT_STRICT) if default is None else default
        self._max_depth = DEFAULT_MAX_DEPTH if max_depth is None else max_depth
        self._resolvers = [
            self._functions.get,
            self._classes.find_method,
            mapping_resolver(self._globals),
        ]
        for name, callback in DEFAULT_FUNCTIONS.items():
            self._functions.add(name, callback)

    @property
    def default(self) -> bool:
        return self._default

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def functions(self) -> List[str]:
        """Names of the custom functions, built-ins included."""
        return self._functions.names()

    @property
    def classes(self) -> List[type]:
        """Registered classes in resolution order."""
        return self._classes.classes()

    def add_func(self, name: str, callback: Callable) -> None:
        """Register a custom function, replacing any function of the same name."""
        self._functions.add(name, callback)

    def register(self, name: Optional[str] = None):
        """Decorator form of :meth:`add_func`; defaults to the function's name."""

        def decorator(func: Callable):
            self.add_func(name or func.__name__, func)
            return func

        return decorator

    def remove_func(self, name: str) -> None:
        self._functions.remove(name)

    def has_func(self, name: str) -> bool:
        return self._functions.has(name)

    def add_class(self, target: Union[str, type]) -> None:
        """Expose the static and class methods of a class.

        *target* is a class or a dotted ``"package.module.Class"`` path.
        Paths that do not name a class are ignored.
        """
        self._classes.add(target)

    def resolve(self, name: str) -> Callable:
        """Find a function by name: custom table, then classes, then globals."""
        return resolve_function(name, self._resolvers)

    def render(
        self,
        text: str,
        variables: Optional[Mapping[str, Any]] = None,
        default: Optional[bool] = None,
    ) -> str:
        """
        Replace every ``{...}`` tag in *text*.

        Args:
            text: Template text
            variables: Values available to the head of each chain
            default: If true, failing tags render as empty strings; if false
                the first failure is raised. Falls back to the engine setting.

        Returns:
            The rendered text
        """
        if default is None:
            default = self._default
        return self._render(text, variables or {}, default, 0)

    def evaluate(
        self,
        expression: str,
        variables: Optional[Mapping[str, Any]] = None,
        default: Optional[bool] = None,
    ) -> str:
        """Evaluate the inner text of a single tag, without the braces."""
        if default is None:
            default = self._default
        return self._evaluate(expression, variables or {}, default, 0)

    def _render(self, text: str, variables: Mapping[str, Any], default: bool, depth: int) -> str:
        if depth > self._max_depth:
            raise NestingTooDeep(self._max_depth)

        tags = find_tags(text)
        if not tags:
            return text

        out: List[str] = []
        cursor = 0
        for tag in tags:
            out.append(text[cursor : tag.start])
            out.append(self._render_tag(tag, variables, default, depth))
            cursor = tag.end
        out.append(text[cursor:])
        return "".join(out)

    def _render_tag(self, tag: Tag, variables: Mapping[str, Any], default: bool, depth: int) -> str:
        if tag.escaped:
            return "{" + tag.inner + "}"
        try:
            return self._evaluate(tag.inner, variables, default, depth)
        except Exception as exc:
            if not default:
                raise
            logger.debug("Tag %r rendered empty: %s", tag.raw, exc)
            return ""

    def _evaluate(self, expression: str, variables: Mapping[str, Any], default: bool, depth: int) -> str:
        chain = split_chain(expression)
        if not chain:
            return ""

        head = chain[0]
        if head.startswith(DIRECT_CALL):
            value = self._call(parse_token(head), None, variables, default, depth, piped=False)
        elif head in variables:
            value = variables[head]
        elif default:
            value = ""
        else:
            raise UndefinedVariable(head)

        for raw in chain[1:]:
            token = parse_token(raw)
            if token.direct:
                raise InvalidTokenSyntax(raw)
            value = self._call(token, value, variables, default, depth, piped=True)

        return stringify(value)

    def _call(
        self,
        token: Token,
        value: Any,
        variables: Mapping[str, Any],
        default: bool,
        depth: int,
        piped: bool,
    ) -> Any:
        function = self.resolve(token.name)
        args = self._arguments(token, variables, default, depth)

        if piped:
            if PLACEHOLDER in args:
                args[args.index(PLACEHOLDER)] = value
            else:
                args.insert(0, value)

        try:
            return function(*args)
        except RismaError:
            raise
        except Exception as exc:
            raise InvocationError(token.name, exc) from exc

    def _arguments(self, token: Token, variables: Mapping[str, Any], default: bool, depth: int) -> List[Any]:
        if token.args is None:
            return []
        # nested tags resolve before the literals are parsed
        text = self._render(token.args, variables, default, depth + 1)
        return parse_arguments(text, token.name)


_default_engine = Engine()


def get_engine() -> Engine:
    """Return the engine behind the module-level helpers."""
    return _default_engine


def register(name: Optional[str] = None):
    return _default_engine.register(name)


def add_func(name: str, callback: Callable) -> None:
    _default_engine.add_func(name, callback)


def add_class(target: Union[str, type]) -> None:
    _default_engine.add_class(target)


def render(text: str, variables: Optional[Mapping[str, Any]] = None, default: Optional[bool] = None) -> str:
    return _default_engine.render(text, variables, default)
