"""Base classes for domain layer.

Provides foundational abstractions for entities, value objects,
aggregates, and domain events following DDD patterns.
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, Self, TypeVar
from uuid import UUID, uuid4


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. A product's reviews are value objects: they have
    no lifecycle outside the product that owns them.
    """

    pass


# ============================================================================
# Entity Base
# ============================================================================


T = TypeVar("T")


@dataclass
class Entity(ABC, Generic[T]):
    """Base class for entities.

    Two entities are equal if they have the same identity,
    regardless of their other attributes.

    Attributes:
        id: Unique identifier for this entity.
    """

    id: T

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


# ============================================================================
# Aggregate Root Base
# ============================================================================


@dataclass(kw_only=True, eq=False)
class AggregateRoot(Entity[T], Generic[T]):
    """Base class for aggregate roots.

    Aggregate roots are the unit of persistence: a store loads and saves
    the whole aggregate, and uses ``version`` for optimistic locking.

    Attributes:
        version: Incremented on every mutation.
        created_at: Timestamp when the aggregate was created.
        updated_at: Timestamp of last modification.
    """

    version: int = field(default=1, compare=False)
    created_at: datetime = field(default_factory=utc_now, compare=False)
    updated_at: datetime = field(default_factory=utc_now, compare=False)
    _events: list["DomainEvent"] = field(
        default_factory=list,
        init=False,
        repr=False,
        compare=False,
    )
    _persisted_version: int | None = field(
        default=None,
        init=False,
        repr=False,
        compare=False,
    )

    def _record_event(self, event: "DomainEvent") -> None:
        """Record a domain event.

        Events are collected and published after the aggregate is persisted.

        Args:
            event: Domain event to record.
        """
        self._events.append(event)

    def collect_events(self) -> list["DomainEvent"]:
        """Collect and clear recorded events.

        Returns:
            List of domain events that were recorded.
        """
        events = self._events.copy()
        self._events.clear()
        return events

    def _touch(self) -> None:
        """Update the updated_at timestamp and increment version."""
        self.updated_at = utc_now()
        self.version += 1

    @property
    def persisted_version(self) -> int | None:
        """Version the store held when this copy was loaded or saved.

        None for an aggregate that has never been persisted.
        """
        return self._persisted_version

    def mark_persisted(self) -> None:
        """Record that the current version now matches the store."""
        self._persisted_version = self.version

    def clone(self) -> Self:
        """Deep copy of the aggregate without pending events.

        Returns:
            Independent copy safe to hand to another caller.
        """
        duplicate = copy.deepcopy(self)
        duplicate._events.clear()
        return duplicate


# ============================================================================
# Domain Event Base
# ============================================================================


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for domain events.

    Attributes:
        event_id: Unique identifier for this event instance.
        event_type: String identifier for the event type (set by subclass).
        occurred_at: Timestamp when the event occurred.
        aggregate_id: ID of the aggregate that emitted this event.
        aggregate_type: Type name of the aggregate.
    """

    event_type: ClassVar[str]

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utc_now)
    aggregate_id: str = field(default="")
    aggregate_type: str = field(default="")

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event.
        """
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "payload": self._payload(),
        }

    @abstractmethod
    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload data."""
        pass
