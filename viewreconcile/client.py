"""An in-memory object store offering the client operations the reconciler relies on."""

from __future__ import annotations

import copy
import enum
from typing import Any, Callable, Mapping, MutableMapping

from .reconciler import GroupVersionKind


class NotFoundError(LookupError):
    """The requested object does not exist."""


class OperationResult(str, enum.Enum):
    """What create_or_update did."""

    NONE = "unchanged"
    CREATED = "created"
    UPDATED = "updated"

    def __str__(self) -> str:
        return self.value


def object_key(obj: Mapping[str, Any]) -> tuple[str, str]:
    """Return the (namespace, name) pair of an object."""
    metadata = obj.get("metadata")
    if not isinstance(metadata, Mapping):
        metadata = {}
    return (metadata.get("namespace") or "", metadata.get("name") or "")


def _store_key(obj: Mapping[str, Any]) -> tuple[str, str, str, str]:
    gvk = GroupVersionKind.from_object(obj)
    namespace, name = object_key(obj)
    return (gvk.group, gvk.kind, namespace, name)


def _merge_patch(target: Any, patch: Any) -> Any:
    """Apply a JSON merge patch to ``target`` and return the result."""
    if not isinstance(patch, Mapping):
        return copy.deepcopy(patch)
    result = copy.deepcopy(dict(target)) if isinstance(target, Mapping) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = _merge_patch(result.get(key), value)
    return result


class Client:
    """Objects kept in memory, keyed by group, kind, namespace and name.

    The status is a subresource for updates: ``update`` keeps the stored
    status and ``update_status`` changes nothing but the status. Merge
    patches sent through ``patch`` apply to the whole object.
    """

    def __init__(self, objects: tuple[Mapping[str, Any], ...] | list = ()):
        self._objects: dict[tuple[str, str, str, str], dict[str, Any]] = {}
        for obj in objects:
            self.create(obj)

    def _stored(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        key = _store_key(obj)
        try:
            return self._objects[key]
        except KeyError:
            group, kind, namespace, name = key
            raise NotFoundError(
                f"{kind}.{group or 'core'} {namespace}/{name} not found"
            ) from None

    def get(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of the stored object with the identity of ``obj``."""
        return copy.deepcopy(self._stored(obj))

    def create(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        """Store a new object; raise ValueError if it already exists."""
        key = _store_key(obj)
        if key in self._objects:
            raise ValueError(f"object {key[2]}/{key[3]} already exists")
        self._objects[key] = copy.deepcopy(dict(obj))
        return copy.deepcopy(self._objects[key])

    def update(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        """Replace a stored object, keeping its current status."""
        current = self._stored(obj)
        new = copy.deepcopy(dict(obj))
        new.pop("status", None)
        if "status" in current:
            new["status"] = copy.deepcopy(current["status"])
        self._objects[_store_key(obj)] = new
        return copy.deepcopy(new)

    def update_status(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        """Replace only the status of a stored object."""
        current = self._stored(obj)
        new = copy.deepcopy(current)
        if "status" in obj:
            new["status"] = copy.deepcopy(obj["status"])
        else:
            new.pop("status", None)
        self._objects[_store_key(obj)] = new
        return copy.deepcopy(new)

    def delete(self, obj: Mapping[str, Any]) -> None:
        """Remove a stored object."""
        self._stored(obj)
        del self._objects[_store_key(obj)]

    def patch(self, obj: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
        """Apply a JSON merge patch to a stored object."""
        key = _store_key(obj)
        current = self._stored(obj)
        new = _merge_patch(current, patch)
        self._objects[key] = new
        return copy.deepcopy(new)

    def patch_status(self, obj: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
        """Apply the status part of a JSON merge patch to a stored object."""
        key = _store_key(obj)
        current = self._stored(obj)
        new = copy.deepcopy(current)
        if "status" in patch:
            status = _merge_patch(current.get("status"), patch["status"])
            if status is None:
                new.pop("status", None)
            else:
                new["status"] = status
        self._objects[key] = new
        return copy.deepcopy(new)


def _replace(obj: MutableMapping[str, Any], content: Mapping[str, Any]) -> None:
    obj.clear()
    obj.update(copy.deepcopy(dict(content)))


def _apply_mutation(
    mutate: Callable[[MutableMapping[str, Any]], None],
    key: tuple[str, str],
    obj: MutableMapping[str, Any],
) -> None:
    mutate(obj)
    if object_key(obj) != key:
        raise ValueError("mutate cannot change the object name or namespace")


def create_or_update(
    client: Client,
    obj: MutableMapping[str, Any],
    mutate: Callable[[MutableMapping[str, Any]], None],
) -> OperationResult:
    """Create ``obj`` or update the stored copy, after ``mutate(obj)`` has shaped it.

    ``obj`` is filled with the stored state before ``mutate`` runs and holds
    the final state afterwards. A status set by ``mutate`` is written through
    the status subresource. A failed create falls back to an update.
    """
    key = object_key(obj)
    try:
        current = client.get(obj)
    except NotFoundError:
        _apply_mutation(mutate, key, obj)
        try:
            created = client.create(obj)
        except ValueError:
            pass
        else:
            _replace(obj, created)
            return OperationResult.CREATED
    else:
        _replace(obj, current)

    _apply_mutation(mutate, key, obj)

    status = obj.get("status")
    has_status = isinstance(status, Mapping)
    if has_status:
        status = copy.deepcopy(status)

    updated = client.update(obj)
    if has_status:
        updated["status"] = status
        updated = client.update_status(updated)

    _replace(obj, updated)
    return OperationResult.UPDATED