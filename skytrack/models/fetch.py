"""Outcome of a single upstream fetch attempt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class FetchSuccess:
    """A 2xx response; ``body`` is the undecoded response text."""

    body: str


@dataclass(frozen=True)
class FetchHttpError:
    status: int
    body: str = ""


@dataclass(frozen=True)
class FetchTimeout:
    timeout: float


@dataclass(frozen=True)
class FetchNetworkError:
    message: str


FetchOutcome = Union[FetchSuccess, FetchHttpError, FetchTimeout, FetchNetworkError]

__all__ = [
    "FetchHttpError",
    "FetchNetworkError",
    "FetchOutcome",
    "FetchSuccess",
    "FetchTimeout",
]
