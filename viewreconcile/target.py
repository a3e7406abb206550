"""Targets: writing deltas into a resource by update or by merge patch."""

from __future__ import annotations

import copy
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional

from .client import Client, NotFoundError, create_or_update, object_key
from .reconciler import Delta, DeltaType, GroupVersionKind
from .resource import Resource, ResourceSpec, RESTMapper
from .util import stringify

_log = logging.getLogger(__name__)

_WRITE_TYPES = frozenset(
    {DeltaType.ADDED, DeltaType.UPSERTED, DeltaType.UPDATED, DeltaType.REPLACED}
)


class TargetType(str, enum.Enum):
    """How a target writes: replacing objects or patching them."""

    UPDATER = "Updater"
    PATCHER = "Patcher"

    def __str__(self) -> str:
        return self.value


@dataclass
class TargetSpec:
    """Where to write and how; an empty type means Updater."""

    resource: ResourceSpec = field(default_factory=ResourceSpec)
    type: str = ""


def _metadata(obj: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    metadata = obj.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
        obj["metadata"] = metadata
    return metadata


def _set_gvk(obj: MutableMapping[str, Any], gvk: GroupVersionKind) -> None:
    obj["apiVersion"] = gvk.api_version
    obj["kind"] = gvk.kind


def _set_identity(obj: MutableMapping[str, Any], namespace: str, name: str) -> None:
    metadata = _metadata(obj)
    for key, value in (("namespace", namespace), ("name", name)):
        if value:
            metadata[key] = value
        else:
            metadata.pop(key, None)


def _skeleton(gvk: GroupVersionKind, namespace: str, name: str) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    _set_gvk(obj, gvk)
    _set_identity(obj, namespace, name)
    return obj


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (bool, int, float, str))


def remove_nested_map(content: Mapping[str, Any]) -> dict[str, Any]:
    """Build a merge patch that nulls every scalar leaf of ``content``."""
    result: dict[str, Any] = {}
    for key, value in content.items():
        if _is_scalar(value):
            result[key] = None
        elif isinstance(value, Mapping):
            result[key] = remove_nested_map(value)
        elif isinstance(value, list):
            result[key] = remove_nested_list(value)
    return result


def remove_nested_list(items: list) -> list:
    """Null every scalar leaf of a list, keeping its shape."""
    result: list = []
    for value in items:
        if isinstance(value, Mapping):
            result.append(remove_nested_map(value))
        elif isinstance(value, list):
            result.append(remove_nested_list(value))
        else:
            result.append(None)
    return result


def merge_metadata(obj: MutableMapping[str, Any], new: Mapping[str, Any]) -> None:
    """Add the labels and annotations of ``new`` to those of ``obj``."""
    new_metadata = new.get("metadata")
    if not isinstance(new_metadata, Mapping):
        return
    for key in ("labels", "annotations"):
        incoming = new_metadata.get(key)
        if incoming is None:
            continue
        metadata = _metadata(obj)
        merged = dict(metadata.get(key) or {})
        merged.update(incoming)
        metadata[key] = merged


class Target(Resource):
    """Writes deltas into a target resource through a client."""

    def __init__(self, mapper: Optional[RESTMapper], client: Client, spec: TargetSpec):
        super().__init__(mapper, spec.resource)
        self.client = client
        self.target = spec

    def __str__(self) -> str:
        return f"{super().__str__()}<type:{self.target.type}>"

    def write(self, delta: Delta) -> None:
        """Enforce a delta on the target.

        Updaters write the delta object as is. Patchers merge-patch the target
        with the delta object on additions and updates, and on deletion remove
        the delta object's content from the target.
        """
        if delta.object is None:
            raise ValueError("write: empty object in delta")

        gvk = self.gvk()
        obj = copy.deepcopy(delta.object)
        _set_gvk(obj, gvk)
        delta = Delta(delta.type, obj)

        kind = str(self.target.type)
        if kind in ("", TargetType.UPDATER.value):
            self._update(delta, gvk)
        elif kind == TargetType.PATCHER.value:
            self._patch(delta, gvk)
        else:
            raise ValueError(f"unknown target type: {kind}")

    def _update(self, delta: Delta, gvk: GroupVersionKind) -> None:
        new = delta.object
        _log.debug("updating target %s: %s %s", self, delta.type, stringify(new))

        if delta.type in _WRITE_TYPES:
            namespace, name = object_key(new)
            obj = _skeleton(gvk, namespace, name)

            def mutate(current: MutableMapping[str, Any]) -> None:
                for key in [k for k in current if k != "metadata" and k not in new]:
                    del current[key]
                for key, value in new.items():
                    if key != "metadata":
                        current[key] = copy.deepcopy(value)
                # labels and annotations are only ever added by an Updater
                merge_metadata(current, new)
                _set_gvk(current, gvk)
                _set_identity(current, namespace, name)

            result = create_or_update(self.client, obj, mutate)
            _log.debug("add/upsert %s/%s: %s", namespace, name, result)
        elif delta.type is DeltaType.DELETED:
            self.client.delete(new)
        else:
            _log.debug("target %s: ignoring delta of type %s", self, delta.type)

    def _patch(self, delta: Delta, gvk: GroupVersionKind) -> None:
        new = delta.object
        _log.debug("patching target %s: %s %s", self, delta.type, stringify(new))
        namespace, name = object_key(new)

        if delta.type in _WRITE_TYPES:
            key_obj = _skeleton(GroupVersionKind.from_object(new), namespace, name)
            self.client.get(key_obj)
            patched = self.client.patch(key_obj, copy.deepcopy(new))

            status = new.get("status")
            if isinstance(status, Mapping):
                patched["status"] = copy.deepcopy(status)
                self.client.patch_status(patched, patched)
        elif delta.type is DeltaType.DELETED:
            patch = remove_nested_map(new)
            # keep the GVK and the namespace/name intact
            patch["apiVersion"] = gvk.api_version
            patch["kind"] = gvk.kind
            metadata = _metadata(patch)
            metadata["namespace"] = namespace
            metadata["name"] = name
            _log.debug("delete-patch %s/%s: %s", namespace, name, stringify(patch))
            try:
                self.client.patch(new, patch)
            except NotFoundError:
                pass
        else:
            _log.debug("target %s: ignoring delta of type %s", self, delta.type)