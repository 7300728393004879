"""Strategy table the host looks strategies up in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class StrategyDescriptor:
    """Registration entry for a build strategy."""

    name: str
    display_name: str
    factory: Callable[..., Any]

    def create(self, *args: Any, **kwargs: Any) -> Any:
        return self.factory(*args, **kwargs)


# Module-level registry
_strategies: dict[str, StrategyDescriptor] = {}


def register_strategy(name: str, display_name: str) -> Callable[[T], T]:
    """
    Class decorator registering a strategy under a unique name.

    Raises:
        ValueError: If the name is already taken by another factory.
    """

    def decorator(factory: T) -> T:
        existing = _strategies.get(name)
        if existing is not None and existing.factory is not factory:
            raise ValueError(f"Strategy already registered: {name}")
        _strategies[name] = StrategyDescriptor(name, display_name, factory)  # type: ignore[arg-type]
        return factory

    return decorator


def get_strategy(name: str) -> StrategyDescriptor:
    """
    Look up a registered strategy.

    Raises:
        KeyError: If no strategy has that name.
    """
    try:
        return _strategies[name]
    except KeyError:
        raise KeyError(f"Unknown strategy: {name}")


def list_strategies() -> list[StrategyDescriptor]:
    """All registered strategies, sorted by name."""
    return [_strategies[name] for name in sorted(_strategies)]
