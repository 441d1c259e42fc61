"""Function table, class registry and the ordered resolver tiers."""

from __future__ import annotations

import importlib
import inspect
import logging
import re
import types
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .errors import FunctionNotFound

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Optional[Callable]]

_NAME_RE = re.compile(r"[A-Za-z0-9_]+")
# classmethods of C types are exposed as descriptors, not classmethod objects
_CLASS_LEVEL_METHODS = (staticmethod, classmethod, types.ClassMethodDescriptorType)


def _validate_name(name: str) -> None:
    if not isinstance(name, str) or not _NAME_RE.fullmatch(name):
        raise ValueError(f"Invalid function name '{name}'")


def exists(value: Any) -> str:
    """``"0"`` for ``None`` or an empty string, ``"1"`` otherwise."""
    return "0" if value is None or value == "" else "1"


def ok(value: Any) -> str:
    """``"1"`` for a truthy value, ``"0"`` otherwise."""
    return "1" if value else "0"


DEFAULT_FUNCTIONS: Dict[str, Callable] = {"exists": exists, "ok": ok}


@dataclass(frozen=True)
class _FunctionRegistration:
    name: str
    callback: Callable


class FunctionTable:
    """Custom functions registered by name. Later registrations win."""

    def __init__(self) -> None:
        self._functions: Dict[str, _FunctionRegistration] = {}

    def add(self, name: str, callback: Callable) -> None:
        """
        Register a function.

        Args:
            name: Name used in templates
            callback: Callable receiving the piped value and literal arguments
        """
        _validate_name(name)
        if not callable(callback):
            raise TypeError(f"Function '{name}' must be callable")
        self._functions[name] = _FunctionRegistration(name=name, callback=callback)

    def get(self, name: str) -> Optional[Callable]:
        registration = self._functions.get(name)
        return registration.callback if registration is not None else None

    def remove(self, name: str) -> None:
        """Remove a function; unknown names are ignored."""
        self._functions.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> List[str]:
        return sorted(self._functions)


def _load_class(target: Union[str, type]) -> Optional[type]:
    if isinstance(target, type):
        return target
    if not isinstance(target, str) or "." not in target:
        return None

    module_name, _, class_name = target.rpartition(".")
    try:
        module = importlib.import_module(module_name)
    except (ImportError, ValueError, TypeError):
        return None
    found = getattr(module, class_name, None)
    return found if isinstance(found, type) else None


class ClassRegistry:
    """Classes whose static and class methods are exposed to templates.

    Lookup walks the classes in registration order; duplicates are kept.
    """

    def __init__(self) -> None:
        self._classes: List[type] = []

    def add(self, target: Union[str, type]) -> bool:
        cls = _load_class(target)
        if cls is None:
            logger.debug("Ignoring unknown class %r", target)
            return False
        self._classes.append(cls)
        return True

    def find_method(self, name: str) -> Optional[Callable]:
        if name.startswith("_"):
            return None
        for cls in self._classes:
            attr = inspect.getattr_static(cls, name, None)
            if isinstance(attr, _CLASS_LEVEL_METHODS):
                return getattr(cls, name)
        return None

    def classes(self) -> List[type]:
        return list(self._classes)


def mapping_resolver(functions: Mapping[str, Callable]) -> Resolver:
    """Build a resolver tier backed by a plain name -> callable mapping."""

    def resolver(name: str) -> Optional[Callable]:
        return functions.get(name)

    return resolver


def resolve(name: str, resolvers: Sequence[Resolver]) -> Callable:
    """Return the first callable any tier produces for *name*."""
    for resolver in resolvers:
        found = resolver(name)
        if found is not None:
            return found
    raise FunctionNotFound(name)
