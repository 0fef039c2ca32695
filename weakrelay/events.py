"""
Event argument types for the event handler relay shapes.

Defines the EventArgs base payload passed alongside the sender by
WeakEventHandler, and the CollectionChangedEventArgs payload passed by
WeakCollectionChangedHandler to describe how an observable collection changed.
"""

import enum
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import ClassVar


class EventArgs(object):
    """Base class for event payloads which carry no data."""

    EMPTY: ClassVar["EventArgs"]
    """Shared instance for events that have nothing to say."""


EventArgs.EMPTY = EventArgs()


class CollectionChangedAction(enum.Enum):
    """The kind of change made to a collection."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    RESET = "reset"


@dataclass(frozen=True)
class CollectionChangedEventArgs(EventArgs):
    """
    Describes a change to an observable collection.
    Use the action specific constructors rather than building one directly.
    """

    action: CollectionChangedAction
    """What happened to the collection."""

    new_items: tuple[Any, ...] = field(default=())
    """Items added, or the replacement items."""

    old_items: tuple[Any, ...] = field(default=())
    """Items removed, replaced or moved."""

    new_index: int = -1
    """Where new_items start in the collection, -1 if unknown."""

    old_index: int = -1
    """Where old_items started in the collection, -1 if unknown."""

    @classmethod
    def added(cls, items: Any, index: int = -1) -> "CollectionChangedEventArgs":
        return cls(
            CollectionChangedAction.ADD, new_items=tuple(items), new_index=index
        )

    @classmethod
    def removed(cls, items: Any, index: int = -1) -> "CollectionChangedEventArgs":
        return cls(
            CollectionChangedAction.REMOVE, old_items=tuple(items), old_index=index
        )

    @classmethod
    def replaced(
        cls, new_items: Any, old_items: Any, index: int = -1
    ) -> "CollectionChangedEventArgs":
        return cls(
            CollectionChangedAction.REPLACE,
            new_items=tuple(new_items),
            old_items=tuple(old_items),
            new_index=index,
            old_index=index,
        )

    @classmethod
    def moved(
        cls, items: Any, new_index: int, old_index: int
    ) -> "CollectionChangedEventArgs":
        """
        Raises:
            ValueError: If either index is negative.
        """
        if new_index < 0 or old_index < 0:
            raise ValueError(
                f"Move requires both indices, got new_index={new_index}, "
                f"old_index={old_index}"
            )

        moved_items = tuple(items)
        return cls(
            CollectionChangedAction.MOVE,
            new_items=moved_items,
            old_items=moved_items,
            new_index=new_index,
            old_index=old_index,
        )

    @classmethod
    def reset(cls) -> "CollectionChangedEventArgs":
        """The collection changed dramatically, listeners should re-read it."""
        return cls(CollectionChangedAction.RESET)
