"""Bridge between synchronous click commands and the async application layer."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import click

from stockroom.domain.exceptions import DomainException

T = TypeVar("T")


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run *coro* to completion, turning domain errors into CLI errors."""
    try:
        return asyncio.run(coro)
    except DomainException as exc:
        raise click.ClickException(str(exc))
