"""
Unit tests for the relay shapes and the event argument types they carry.

Every shape is the same relay pinned to an arity and to whether results are
returned, so these tests exercise each shape through a publisher the way it
would be used rather than re-testing the relay mechanics.
"""

import dataclasses
import gc
from typing import Any

import pytest

import weakrelay
from weakrelay.events import CollectionChangedAction
from weakrelay.events import CollectionChangedEventArgs


class ObservableList(object):
    """A minimal publisher raising collection changed events."""

    def __init__(self) -> None:
        self.items: list[Any] = []
        self.collection_changed: list[weakrelay.WeakCollectionChangedHandler] = []

    def _raise(self, args: CollectionChangedEventArgs) -> None:
        for handler in list(self.collection_changed):
            handler(self, args)

    def append(self, item: Any) -> None:
        self.items.append(item)
        self._raise(CollectionChangedEventArgs.added([item], len(self.items) - 1))

    def pop(self, index: int) -> Any:
        item = self.items.pop(index)
        self._raise(CollectionChangedEventArgs.removed([item], index))
        return item

    def clear(self) -> None:
        self.items.clear()
        self._raise(CollectionChangedEventArgs.reset())


class View(object):
    def __init__(self, log: list[Any]) -> None:
        self.log = log

    def on_collection_changed(
        self, sender: ObservableList, args: CollectionChangedEventArgs
    ) -> None:
        self.log.append((sender, args.action, args.new_items, args.old_items))

    def on_event(self, sender: Any, args: weakrelay.EventArgs) -> None:
        self.log.append((sender, args))


@pytest.mark.parametrize(
    "shape, arity, returns_value",
    [
        (weakrelay.WeakAction, 0, False),
        (weakrelay.WeakArgAction, 1, False),
        (weakrelay.WeakFunc, 0, True),
        (weakrelay.WeakArgFunc, 1, True),
        (weakrelay.WeakEventHandler, 2, False),
        (weakrelay.WeakCollectionChangedHandler, 2, False),
        (weakrelay.WeakCallbackRelay, None, True),
    ],
)
def test_shape_signature(shape: type, arity: Any, returns_value: bool) -> None:
    """Test that each shape pins the expected arity and result handling."""
    assert issubclass(shape, weakrelay.WeakCallbackRelay)
    assert shape.arity == arity
    assert shape.returns_value is returns_value


def test_event_handler_receives_sender_and_args() -> None:
    """Test that the event handler shape forwards sender and event args."""
    log: list[Any] = []
    view = View(log)
    sender = object()
    relay = weakrelay.WeakEventHandler(view.on_event)

    relay.dispatch(sender, weakrelay.EventArgs.EMPTY)

    assert log == [(sender, weakrelay.EventArgs.EMPTY)]


def test_event_handler_requires_two_arguments() -> None:
    """Test that the event handler shape refuses a missing sender."""
    log: list[Any] = []
    view = View(log)
    relay = weakrelay.WeakEventHandler(view.on_event)

    with pytest.raises(TypeError):
        relay.dispatch(weakrelay.EventArgs.EMPTY)


def test_collection_changed_handler() -> None:
    """Test that collection changes reach a live view through its relay."""
    log: list[Any] = []
    collection = ObservableList()
    view = View(log)
    collection.collection_changed.append(
        weakrelay.WeakCollectionChangedHandler(view.on_collection_changed)
    )

    collection.append("a")
    collection.append("b")
    collection.pop(0)
    collection.clear()

    assert log == [
        (collection, CollectionChangedAction.ADD, ("a",), ()),
        (collection, CollectionChangedAction.ADD, ("b",), ()),
        (collection, CollectionChangedAction.REMOVE, (), ("a",)),
        (collection, CollectionChangedAction.RESET, (), ()),
    ]


def test_collection_outlives_view() -> None:
    """Test that a long lived collection does not keep its views alive."""
    log: list[Any] = []
    collection = ObservableList()
    view = View(log)
    collection.collection_changed.append(
        weakrelay.WeakCollectionChangedHandler(view.on_collection_changed)
    )

    del view
    gc.collect()

    collection.append("unseen")
    assert log == []
    assert collection.items == ["unseen"]


def test_collection_changed_args_added() -> None:
    """Test the payload describing added items."""
    args = CollectionChangedEventArgs.added(["x", "y"], 3)

    assert args.action is CollectionChangedAction.ADD
    assert args.new_items == ("x", "y")
    assert args.old_items == ()
    assert args.new_index == 3
    assert args.old_index == -1


def test_collection_changed_args_replaced() -> None:
    """Test the payload describing replaced items."""
    args = CollectionChangedEventArgs.replaced(["new"], ["old"], 1)

    assert args.action is CollectionChangedAction.REPLACE
    assert args.new_items == ("new",)
    assert args.old_items == ("old",)
    assert args.new_index == args.old_index == 1


def test_collection_changed_args_moved() -> None:
    """Test the payload describing moved items."""
    args = CollectionChangedEventArgs.moved(["item"], new_index=0, old_index=2)

    assert args.action is CollectionChangedAction.MOVE
    assert args.new_items == args.old_items == ("item",)
    assert (args.new_index, args.old_index) == (0, 2)


def test_collection_changed_args_moved_requires_indices() -> None:
    """Test that a move without both indices is rejected."""
    with pytest.raises(ValueError, match="Move requires both indices"):
        CollectionChangedEventArgs.moved(["item"], new_index=0, old_index=-1)


def test_collection_changed_args_frozen() -> None:
    """Test that event payloads cannot be altered by a handler."""
    args = CollectionChangedEventArgs.reset()

    with pytest.raises(dataclasses.FrozenInstanceError):
        args.action = CollectionChangedAction.ADD  # type: ignore[misc]


def test_collection_changed_args_are_event_args() -> None:
    """Test that collection payloads can be handled as plain event args."""
    assert isinstance(CollectionChangedEventArgs.reset(), weakrelay.EventArgs)
