"""Explicit outcomes for admin and migration operations.

Callers branch on the variant type instead of catching exceptions or
matching error text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    value: Any = None


@dataclass(frozen=True)
class Conflict:
    message: str


@dataclass(frozen=True)
class NotFound:
    message: str


@dataclass(frozen=True)
class InternalError:
    message: str


OpResult = Union[Ok, Conflict, NotFound, InternalError]
