"""Entities with a transform and typed components stored in a registry."""

from __future__ import annotations

from itertools import count
from typing import Any, Optional, TypeVar

from nouframe.transform import Transform

T = TypeVar("T")


def _release(component: Any) -> None:
    close = getattr(component, "close", None)
    if callable(close):
        close()


class Registry:
    """Stores components of entities by entity id and component type."""

    def __init__(self) -> None:
        self._ids = count()
        self._components: dict[int, dict[type, Any]] = {}

    def create(self) -> int:
        """Create a new entity id."""
        entity_id = next(self._ids)
        self._components[entity_id] = {}
        return entity_id

    def valid(self, entity_id: int) -> bool:
        """Whether ``entity_id`` names a live entity."""
        return entity_id in self._components

    def _slot(self, entity_id: int) -> dict[type, Any]:
        try:
            return self._components[entity_id]
        except KeyError:
            raise KeyError(f"invalid entity {entity_id}") from None

    def destroy(self, entity_id: int) -> None:
        """Destroy an entity, releasing all of its components."""
        components = self._slot(entity_id)
        del self._components[entity_id]
        for component in components.values():
            _release(component)

    def emplace(self, entity_id: int, component: Any) -> Any:
        """Attach ``component`` to an entity; the entity must not have one of its type."""
        components = self._slot(entity_id)
        kind = type(component)
        if kind in components:
            raise ValueError(f"entity {entity_id} already has a {kind.__name__}")
        components[kind] = component
        return component

    def get(self, entity_id: int, component_type: type[T]) -> T:
        """Return the component of the given type."""
        components = self._slot(entity_id)
        try:
            return components[component_type]
        except KeyError:
            raise KeyError(
                f"entity {entity_id} has no {component_type.__name__}"
            ) from None

    def remove(self, entity_id: int, component_type: type) -> None:
        """Detach and release the component of the given type, if present."""
        component = self._slot(entity_id).pop(component_type, None)
        if component is not None:
            _release(component)


DEFAULT_REGISTRY = Registry()


class Entity:
    """An object in the scene: an id in a registry plus its own transform."""

    def __init__(self, registry: Optional[Registry] = None) -> None:
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.transform = Transform()
        self.id: Optional[int] = self.registry.create()

    def _live_id(self) -> int:
        if self.id is None:
            raise RuntimeError("entity has been destroyed")
        return self.id

    def add(self, component_type: type[T], *args: Any, **kwargs: Any) -> T:
        """Construct a component from the arguments and attach it."""
        entity_id = self._live_id()
        return self.registry.emplace(entity_id, component_type(*args, **kwargs))

    def get(self, component_type: type[T]) -> T:
        """Return the attached component of the given type."""
        return self.registry.get(self._live_id(), component_type)

    def remove(self, component_type: type) -> None:
        """Detach the component of the given type."""
        self.registry.remove(self._live_id(), component_type)

    def destroy(self) -> None:
        """Destroy the entity and detach its transform; safe to call twice."""
        if self.id is not None:
            entity_id, self.id = self.id, None
            self.registry.destroy(entity_id)
        self.transform.detach()

    def __enter__(self) -> "Entity":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.destroy()