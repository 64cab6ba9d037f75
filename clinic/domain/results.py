from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The operation completed; ``value`` is the affected record (or None for deletes)."""

    value: T


@dataclass(frozen=True)
class Invalid:
    """Input was rejected before anything was persisted.

    ``errors`` maps each offending field (wire name) to a readable message.
    """

    errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class NotFound:
    """The addressed record, or a record it references, does not exist."""

    entity: str
    entity_id: int


Result = Success[T] | Invalid | NotFound
