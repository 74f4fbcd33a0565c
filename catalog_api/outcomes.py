"""
Outcome types returned by the resource services.

Service operations never raise for an expected outcome: a missing record,
a rejected candidate and a stale version are all values the caller
inspects. Only infrastructure faults travel as exceptions.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    resource: str
    id: str


@dataclass(frozen=True)
class Invalid:
    """Candidate rejected before any store mutation."""

    errors: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class Conflict:
    """The caller's expected version no longer matches the stored one."""

    resource: str
    id: str
    expected_version: Optional[int]
    current_version: Optional[int]


Lookup = Union[Present[T], NotFound]
Created = Union[Present[T], Invalid]
Written = Union[Present[T], NotFound, Invalid, Conflict]
