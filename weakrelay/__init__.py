"""
# Weak Callback Relays

Herein are the relays a publisher stores in its callback slots in place of a
subscriber's bound method, so that subscribing does not keep the subscriber
alive.

While the subscriber lives, dispatching a relay calls the subscriber's method
and forwards arguments and results unchanged. Once the subscriber has been
garbage collected, dispatching silently does nothing, or returns the default
value for value-returning shapes. The publisher remains responsible for
removing the relay from its slot.

    >>> relay = weakrelay.WeakArgAction(counter.on_tick)
    >>> publisher.listeners.append(relay)
"""

from weakrelay import events
from weakrelay import relay
from weakrelay import shapes
from weakrelay.events import CollectionChangedAction
from weakrelay.events import CollectionChangedEventArgs
from weakrelay.events import EventArgs
from weakrelay.relay import RebindError
from weakrelay.relay import RelayConstructionError
from weakrelay.relay import RelayError
from weakrelay.relay import WeakCallbackRelay
from weakrelay.shapes import WeakAction
from weakrelay.shapes import WeakArgAction
from weakrelay.shapes import WeakArgFunc
from weakrelay.shapes import WeakCollectionChangedHandler
from weakrelay.shapes import WeakEventHandler
from weakrelay.shapes import WeakFunc


version_major = 1
version_minor = 0
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

__all__ = [
    "events",
    "relay",
    "shapes",
    "CollectionChangedAction",
    "CollectionChangedEventArgs",
    "EventArgs",
    "RebindError",
    "RelayConstructionError",
    "RelayError",
    "WeakCallbackRelay",
    "WeakAction",
    "WeakArgAction",
    "WeakArgFunc",
    "WeakCollectionChangedHandler",
    "WeakEventHandler",
    "WeakFunc",
]
