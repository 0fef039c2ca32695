"""
Relay shapes.

Each shape is the same WeakCallbackRelay pinned to a callable signature: how
many positional arguments dispatch takes and whether the subscriber's result
is handed back to the publisher. No shape adds logic of its own.

    WeakAction                    () -> None
    WeakArgAction                 (arg) -> None
    WeakFunc                      () -> result
    WeakArgFunc                   (arg) -> result
    WeakEventHandler              (sender, EventArgs) -> None
    WeakCollectionChangedHandler  (sender, CollectionChangedEventArgs) -> None
"""

from weakrelay.relay import WeakCallbackRelay


# -----Actions-----------------------------------------------------------------


class WeakAction(WeakCallbackRelay):
    """A weak relay for a notifier taking no arguments."""

    arity = 0
    returns_value = False


class WeakArgAction(WeakCallbackRelay):
    """A weak relay for a notifier taking a single argument."""

    arity = 1
    returns_value = False


# -----Functions---------------------------------------------------------------


class WeakFunc(WeakCallbackRelay):
    """
    A weak relay for a producer taking no arguments.
    Returns the default value once the target has been collected.
    """

    arity = 0
    returns_value = True


class WeakArgFunc(WeakCallbackRelay):
    """
    A weak relay for a producer taking a single argument.
    Returns the default value once the target has been collected.
    """

    arity = 1
    returns_value = True


# -----Event Handlers----------------------------------------------------------


class WeakEventHandler(WeakCallbackRelay):
    """A weak relay for handlers following the (sender, event_args) protocol."""

    arity = 2
    returns_value = False


class WeakCollectionChangedHandler(WeakEventHandler):
    """
    A weak relay for collection changed handlers, receiving the collection and
    a CollectionChangedEventArgs.
    """
