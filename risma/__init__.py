"""
Risma - placeholder templates with chained function calls
"""

import logging

from .engine import Engine, add_class, add_func, get_engine, register, render
from .errors import (
    ArgumentParseError,
    FunctionNotFound,
    InvalidTokenSyntax,
    InvocationError,
    NestingTooDeep,
    RismaError,
    UndefinedVariable,
)
from .parser import Tag, Token, find_tags, is_valid_expression, split_chain

__version__ = "0.1.0"
__all__ = [
    "Engine",
    "render",
    "register",
    "add_func",
    "add_class",
    "get_engine",
    "Tag",
    "Token",
    "find_tags",
    "split_chain",
    "is_valid_expression",
    "RismaError",
    "UndefinedVariable",
    "FunctionNotFound",
    "ArgumentParseError",
    "InvalidTokenSyntax",
    "InvocationError",
    "NestingTooDeep",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
