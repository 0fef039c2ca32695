"""
Weak callback relay.

Defines the WeakCallbackRelay which a publisher stores in its callback slot in
place of a subscriber's bound method. The relay keeps the method identity and
a weak reference to the subscriber separately, so subscribing never keeps the
subscriber alive. On every dispatch the weak reference is resolved once, the
stored method is rebound to the live target and invoked. Once the target has
been collected dispatching is a silent no-op (or returns the default value for
value-returning shapes).

The relay never unsubscribes itself. The publisher owning the slot is
responsible for removing it, optionally prompted by the on_expired hook.
"""

import inspect
import json
import logging
import types
import typing
import weakref
from typing import Any
from typing import Callable
from typing import Optional


logger = logging.getLogger(__name__)


CALLBACK = Callable[..., Any]
"""
The callable handed to a relay at construction. Usually a bound method of the
subscriber, i.e. `subscriber.on_event`.
"""

EXPIRED_HOOK = Callable[["WeakCallbackRelay"], None]
"""
Signature for the on_expired hook. Receives the relay whose target was just
collected.
"""

_MISSING = object()

_ZERO_VALUES: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
}
"""Return annotations that have a zero value other than None."""


# -----Exceptions--------------------------------------------------------------
class RelayError(Exception):
    """Base class for relay errors."""


class RelayConstructionError(RelayError):
    """Raised when a relay cannot be built from the given callable."""


class RebindError(RelayError):
    """Raised when the stored method cannot be rebound to the live target."""


# -----------------------------------------------------------------------------


def get_callable_name(callable_: Any) -> str:
    """
    Returns the name of the callable, using class name for items with __self__,
    __qualname__ for anything with __qualname__, or str(callable_) if neither
    are found.
    """
    if callable_ is None:
        return "<dead reference>"
    elif hasattr(callable_, "__self__") and not isinstance(
        callable_.__self__, types.ModuleType
    ):
        owner = callable_.__self__
        if not isinstance(owner, type):
            owner = owner.__class__
        name = getattr(callable_, "__name__", type(callable_).__name__)
        return f"{owner.__name__}.{name}"
    elif hasattr(callable_, "__qualname__"):
        return callable_.__qualname__
    else:
        return str(callable_)


def _zero_value_for(method: Any) -> Any:
    """
    Derive the expired-target default from the method's return annotation.

    Only scalar value types have a non-None zero value, everything else
    (including unannotated methods) defaults to None.
    """
    try:
        hints = typing.get_type_hints(method)
    except (NameError, TypeError, AttributeError) as e:
        logger.debug(
            f"Could not resolve return annotation of "
            f"{get_callable_name(method)}, defaulting to None: {e}"
        )
        return None

    return _ZERO_VALUES.get(hints.get("return"))


def _get_signature(method: Any) -> Optional[inspect.Signature]:
    """Signature used to check rebinding, or None when not introspectable."""
    try:
        # The wrapper is what gets invoked, not whatever it decorates.
        return inspect.signature(method, follow_wrapped=False)
    except (TypeError, ValueError):
        return None


class WeakCallbackRelay(object):
    """
    A callback slot that does not keep its subscriber alive.

    The relay is generic over the callable shape. Subclasses in
    weakrelay.shapes only pin `arity` and `returns_value`.

    Example:
        >>> relay = WeakArgAction(counter.on_tick)
        >>> publisher.listeners.append(relay)
        >>> relay(5)  # calls counter.on_tick(5) while counter is alive
    """

    arity: Optional[int] = None
    """Number of positional arguments dispatch accepts. None accepts any."""

    returns_value: bool = True
    """If False, dispatch always returns None, alive or not."""

    def __init__(
        self,
        callback: CALLBACK,
        *,
        default: Any = _MISSING,
        on_expired: Optional[EXPIRED_HOOK] = None,
    ) -> None:
        """
        Args:
            callback (CALLBACK): The callable to relay to. Bound methods are
                split into method identity and a weak reference to their
                instance. Anything without a bound instance is relayed as a
                static call.
            default (Any): Returned by value-returning shapes once the target
                has been collected. Inferred from the return annotation when
                omitted.
            on_expired (Optional[EXPIRED_HOOK]): Called with this relay once
                the target has been collected.
        Raises:
            RelayConstructionError: If callback is not callable, has no
                method identity, or its target cannot be weakly referenced.
        """
        if not callable(callback):
            raise RelayConstructionError(
                f"Cannot relay to non-callable object {callback!r}"
            )

        self._name = get_callable_name(callback)
        self._on_expired = on_expired
        self._target_ref: Optional[weakref.ref[Any]] = None
        self._owner: Optional[type] = None
        self._method: Any = callback

        bound_self = getattr(callback, "__self__", None)
        if bound_self is not None and not isinstance(bound_self, types.ModuleType):
            self._method, self._owner = self._extract_method(callback, bound_self)
            self._target_ref = self._make_weak_ref(bound_self)
        else:
            logger.debug(f"Relaying to {self._name} as a static call")

        self._signature = _get_signature(self._method)
        self._is_async = inspect.iscoroutinefunction(self._method)

        if not self.returns_value:
            self._default = None
        elif default is _MISSING:
            self._default = _zero_value_for(self._method)
        else:
            self._default = default

    @staticmethod
    def _extract_method(callback: CALLBACK, bound_self: Any) -> tuple[Any, type]:
        """Split a bound callable into its unbound method and declaring type."""
        owner = type(bound_self)

        if inspect.ismethod(callback):
            return callback.__func__, owner

        # Bound builtins carry no __func__. Find the descriptor in the MRO that
        # reproduces this exact callable, so super() lookups skip overrides.
        name = getattr(callback, "__name__", None)
        if name:
            for klass in owner.__mro__:
                descriptor = klass.__dict__.get(name)
                if descriptor is None or not hasattr(descriptor, "__get__"):
                    continue

                try:
                    rebound = descriptor.__get__(bound_self, owner)
                except TypeError:
                    continue

                if rebound == callback:
                    return descriptor, owner

        raise RelayConstructionError(
            f"Cannot extract a method identity from {callback!r}"
        )

    def _make_weak_ref(self, target: Any) -> weakref.ref[Any]:
        """Weakly reference the target, notifying on_expired when collected."""
        relay_ref = weakref.ref(self)

        def cleanup(_: weakref.ref[Any]) -> None:
            # Arg needed to add for weakref creation.
            relay = relay_ref()
            if relay is None:
                return

            logger.debug(f"Relay target collected: {relay._name}")
            if relay._on_expired is not None:
                relay._on_expired(relay)

        try:
            return weakref.ref(target, cleanup)
        except TypeError as e:
            raise RelayConstructionError(
                f"Relay target {type(target).__name__} cannot be weakly "
                f"referenced. Add '__weakref__' to its __slots__."
            ) from e

    # -----Properties----------------------------------------------------------

    @property
    def is_async(self) -> bool:
        """True if the relayed method is a coroutine function."""
        return self._is_async

    @property
    def is_static(self) -> bool:
        """True if the relayed callable has no bound target."""
        return self._target_ref is None

    @property
    def is_alive(self) -> bool:
        """
        True while the target can be resolved. Static relays are always alive.
        Expiry is terminal.
        """
        return self.is_static or self._target_ref() is not None

    @property
    def target(self) -> Optional[Any]:
        """The live target, or None if collected or static."""
        if self._target_ref is None:
            return None
        return self._target_ref()

    @property
    def method(self) -> Any:
        """The unbound method identity fixed at construction."""
        return self._method

    @property
    def owner(self) -> Optional[type]:
        """The declaring type of the method, or None for static relays."""
        return self._owner

    @property
    def default(self) -> Any:
        """The value returned when dispatching to a collected target."""
        return self._default

    @property
    def callback(self) -> Optional[CALLBACK]:
        """Get a freshly rebound callback, or None if collected."""
        if self._target_ref is None:
            return self._method

        target = self._target_ref()
        if target is None:
            return None

        return self._bind(target)

    # -----Dispatch------------------------------------------------------------

    def _bind(self, target: Any) -> CALLBACK:
        """
        Rebind the stored method to a resolved target.

        Raises:
            RebindError: If the target is no longer an instance of the
                declaring type or the descriptor refuses to bind.
        """
        if not isinstance(target, self._owner):
            raise RebindError(
                f"Cannot rebind {self._name} to "
                f"{type(target).__name__} instance: not a "
                f"{self._owner.__name__}"
            )

        try:
            return self._method.__get__(target, self._owner)
        except Exception as e:
            raise RebindError(
                f"Cannot rebind {self._name} to "
                f"{type(target).__name__} instance: {e}"
            ) from e

    def _check_arguments(
        self, target: Any, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        """
        Validate the dispatch arguments against the method signature.

        Raises:
            RebindError: If the bound method cannot accept the arguments.
        """
        if self._signature is None:
            return

        bound_args = args if target is None else (target, *args)
        try:
            self._signature.bind(*bound_args, **kwargs)
        except TypeError as e:
            raise RebindError(
                f"Signature mismatch relaying {len(args)} argument(s) to "
                f"{self._name}: {e}"
            ) from e

    def _check_arity(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        """Shapes take exactly `arity` positional arguments and no keywords."""
        if self.arity is None:
            return

        if kwargs:
            raise TypeError(
                f"{type(self).__name__}.dispatch() takes no keyword arguments, "
                f"got {sorted(kwargs)}"
            )

        if len(args) != self.arity:
            raise TypeError(
                f"{type(self).__name__}.dispatch() takes {self.arity} "
                f"argument(s) but {len(args)} were given"
            )

    def _check_sync_dispatch(self) -> None:
        """
        Void shapes would drop an async method's coroutine unawaited.

        Raises:
            TypeError: If the relayed method is a coroutine function.
        """
        if self._is_async and not self.returns_value:
            raise TypeError(
                f"{self._name} is a coroutine function, use dispatch_async() to "
                f"relay it through {type(self).__name__}"
            )

    def _resolve(
        self, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Optional[CALLBACK]:
        """
        Resolve, pin and rebind in one step.

        The returned bound method holds the only strong reference the relay
        ever takes to its target, it lives for as long as the caller keeps it.
        """
        self._check_arity(args, kwargs)

        if self._target_ref is None:
            self._check_arguments(None, args, kwargs)
            return self._method

        target = self._target_ref()
        if target is None:
            return None

        bound = self._bind(target)
        self._check_arguments(target, args, kwargs)
        return bound

    def dispatch(self, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke the relayed method on the live target.

        Args:
            *args (Any): Forwarded unchanged to the method.
            **kwargs (Any): Forwarded unchanged to the method.
        Returns:
            Any: The method's result for value-returning shapes, the default
                value if the target was collected, None for void shapes.
        Raises:
            RebindError: If the method cannot be rebound to the target or
                does not accept the arguments.
            TypeError: If a void shape relays a coroutine function, use
                dispatch_async() for those.
        Note:
            Value-returning shapes hand an async method's coroutine back to
            the caller unawaited.
        """
        self._check_sync_dispatch()

        callback = self._resolve(args, kwargs)
        if callback is None:
            return self._default

        result = callback(*args, **kwargs)
        if self.returns_value:
            return result

        if inspect.iscoroutine(result):
            result.close()
            raise TypeError(
                f"{self._name} returned a coroutine, use dispatch_async() to "
                f"relay it through {type(self).__name__}"
            )

        return None

    __call__ = dispatch

    async def dispatch_async(self, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke the relayed method, awaiting its result if it is awaitable.

        The target stays pinned until the awaited result completes.

        Args:
            *args (Any): Forwarded unchanged to the method.
            **kwargs (Any): Forwarded unchanged to the method.
        Returns:
            Any: Same as dispatch(), after awaiting.
        Raises:
            RebindError: If the method cannot be rebound to the target or
                does not accept the arguments.
        """
        callback = self._resolve(args, kwargs)
        if callback is None:
            return self._default

        result = callback(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result

        return result if self.returns_value else None

    # -----Introspection-------------------------------------------------------

    def matches(self, callback: CALLBACK) -> bool:
        """
        Check if callback names the same method on the same live target.

        Publishers use this to find the relay to remove when a subscriber
        unsubscribes with its bound method.
        """
        if self._target_ref is None:
            return callback == self._method

        target = self._target_ref()
        if target is None or getattr(callback, "__self__", None) is not target:
            return False

        method = getattr(callback, "__func__", None)
        if method is None:
            method = getattr(self._owner, getattr(callback, "__name__", ""), None)

        return method is self._method

    def to_dict(self) -> dict[str, object]:
        """Convert the relay state to a dictionary."""
        return {
            "shape": type(self).__name__,
            "callback": self._name if self.is_alive else "<dead reference>",
            "alive": self.is_alive,
            "static": self.is_static,
            "returns_value": self.returns_value,
            "arity": self.arity,
            "async": self._is_async,
        }

    def to_string(self) -> str:
        """Returns a string representation of the relay."""
        return json.dumps(self.to_dict(), indent=4)

    def __repr__(self) -> str:
        state = "alive" if self.is_alive else "expired"
        return f"<{type(self).__name__} {self._name} ({state})>"
