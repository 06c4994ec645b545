"""Trait registry: the dispatch resolver for generic container operations.

Manifesto:
    One logical operation name, many backends. A :class:`Trait` is a
    callable generic operation that resolves the backend implementation from
    the concrete type of its first argument. Resolution is cached per type by
    ``functools.singledispatch``, so the per-call cost is a dictionary lookup
    rather than a chain of ``isinstance`` checks. Python cannot
    monomorphize, so this small indirection is the accepted price; it is
    never a tag check inside the backend.

    Conformance is checked once, when :func:`register_backend` decorates the
    class: advertising a capability without implementing its required
    operations is a ``TypeError`` at import time. Calling a trait on a type
    that never registered it raises :class:`UnsupportedOperationError`.

Architecture:
    ::

        traits.swap_entry(container, element)
              │
              ▼
        Trait.__call__ ──► singledispatch registry (cached per type)
              │                 ├── HashMap     → HashMap.swap_entry
              │                 ├── OrderedMap  → OrderedMap.swap_entry
              │                 ├── NoneType    → null result (argument error)
              │                 └── object      → UnsupportedOperationError
              ▼
        backend method

Tags:
    ccc, framework, registry, dispatch, traits
"""

from __future__ import annotations

from collections.abc import Callable
from functools import singledispatch
from typing import Any, TypeVar

from ccc.core.errors import UnsupportedOperationError
from ccc.core.logging import get_logger
from ccc.core.protocols import Capability, protocols_for

logger = get_logger(__name__)

C = TypeVar("C", bound=type)

_traits: dict[str, Trait] = {}
_backends: dict[type, Capability] = {}
_loaded: bool = False


class Trait:
    """A generic operation resolved from the container's concrete type.

    Args:
        name: Operation name; also the method name backends implement.
        capability: Capabilities under which backends may provide it.
        required_for: Capabilities for which the method is mandatory.
        null: Zero-argument factory for the result returned when the
            container argument is ``None`` (the operation's argument-error
            shape).
    """

    def __init__(
        self,
        name: str,
        capability: Capability,
        *,
        required_for: Capability = Capability.NONE,
        null: Callable[[], Any] | None = None,
        doc: str = "",
    ):
        if name in _traits:
            raise ValueError(f"Trait '{name}' is already defined")
        self.name = name
        self.capability = capability
        self.required_for = required_for
        self.__doc__ = doc or f"Generic '{name}' operation."
        self._dispatch = singledispatch(self._unsupported)
        if null is not None:
            self._dispatch.register(type(None), lambda _container, *args, **kwargs: null())
        _traits[name] = self

    def _unsupported(self, container: Any, *args: Any, **kwargs: Any) -> Any:
        raise UnsupportedOperationError(self.name, container)

    def __call__(self, container: Any, /, *args: Any, **kwargs: Any) -> Any:
        return self._dispatch(container, *args, **kwargs)

    def register(self, cls: type, func: Callable[..., Any]) -> None:
        """Bind ``func`` as this trait's implementation for ``cls``."""
        self._dispatch.register(cls, func)
        logger.debug("trait_registered", trait=self.name, cls=cls.__name__)

    def implementation(self, cls: type) -> Callable[..., Any] | None:
        """Return the implementation bound for ``cls``, or ``None``."""
        func = self._dispatch.dispatch(cls)
        if func is self._dispatch.registry[object]:
            return None
        return func

    def implementors(self) -> list[type]:
        """Types with a registered implementation (excluding ``None``)."""
        return [
            cls for cls in self._dispatch.registry
            if cls is not object and cls is not type(None)
        ]

    def __repr__(self) -> str:
        return f"Trait({self.name!r})"


def register_backend(cls: C) -> C:
    """Class decorator binding a backend's methods to the trait vocabulary.

    For each capability in ``cls.capabilities``, every trait required for it
    must be a method on ``cls``; optional traits are bound when present.
    Methods belonging to capabilities the class does not advertise are
    left unbound.

    Raises:
        TypeError: ``cls`` advertises a capability it does not implement.
    """
    _ensure_loaded()
    advertised: Capability = getattr(cls, "capabilities", Capability.NONE)
    missing = [
        trait.name
        for trait in _traits.values()
        if trait.required_for & advertised and not callable(getattr(cls, trait.name, None))
    ]
    if missing:
        raise TypeError(
            f"{cls.__name__} advertises {advertised} but does not implement: "
            + ", ".join(sorted(missing))
        )
    unmet = [proto.__name__ for proto in protocols_for(advertised) if not issubclass(cls, proto)]
    if unmet:
        raise TypeError(f"{cls.__name__} does not satisfy: " + ", ".join(unmet))
    bound = 0
    for trait in _traits.values():
        if not trait.capability & advertised:
            continue
        method = getattr(cls, trait.name, None)
        if callable(method):
            trait.register(cls, method)
            bound += 1
    _backends[cls] = advertised
    logger.debug("backend_registered", cls=cls.__name__, traits=bound)
    return cls


def get_trait(name: str) -> Trait:
    """Get a trait by name."""
    _ensure_loaded()
    if name not in _traits:
        available = ", ".join(sorted(_traits))
        raise KeyError(f"Trait '{name}' not found. Available: {available}")
    return _traits[name]


def list_traits() -> list[str]:
    """List all trait names."""
    _ensure_loaded()
    return sorted(_traits)


def list_backends() -> list[type]:
    """List registered backend classes in registration order."""
    _ensure_loaded()
    return list(_backends)


def supports(container: Any, name: str) -> bool:
    """True if ``container`` (instance or class) implements trait ``name``."""
    cls = container if isinstance(container, type) else type(container)
    return get_trait(name).implementation(cls) is not None


def capability_matrix() -> dict[str, dict[str, bool]]:
    """Map each backend name to ``{trait_name: implemented}``."""
    _ensure_loaded()
    return {
        cls.__name__: {
            name: trait.implementation(cls) is not None
            for name, trait in sorted(_traits.items())
            if trait.capability is not Capability.NONE
        }
        for cls in _backends
    }


def _ensure_loaded() -> None:
    """Ensure the trait vocabulary is defined (lazy initialization)."""
    global _loaded
    if not _loaded:
        _loaded = True
        import ccc.traits  # noqa: F401


__all__ = [
    "Trait",
    "register_backend",
    "get_trait",
    "list_traits",
    "list_backends",
    "supports",
    "capability_matrix",
]
