"""Reconcile requests, deltas and the event handler that turns watch events into requests."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

from .util import stringify


class DeltaType(str, enum.Enum):
    """The kind of change a delta or a request carries."""

    ADDED = "Added"
    UPDATED = "Updated"
    DELETED = "Deleted"
    REPLACED = "Replaced"
    SYNC = "Sync"
    UPSERTED = "Upserted"

    def __str__(self) -> str:
        return self.value


@dataclass
class Delta:
    """A change of one object."""

    type: DeltaType
    object: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class GroupVersionKind:
    """An API group, version and kind."""

    group: str = ""
    version: str = ""
    kind: str = ""

    @property
    def api_version(self) -> str:
        """The apiVersion string: "version" for the core group, else "group/version"."""
        return self.version if not self.group else f"{self.group}/{self.version}"

    @classmethod
    def from_object(cls, obj: Mapping[str, Any]) -> "GroupVersionKind":
        """Read the GVK from the apiVersion and kind of an object."""
        api_version = obj.get("apiVersion") or ""
        if "/" in api_version:
            group, version = api_version.split("/", 1)
        else:
            group, version = "", api_version
        return cls(group=group, version=version, kind=obj.get("kind") or "")

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Kind={self.kind}"


@dataclass(frozen=True)
class Request:
    """A reconcile request for one object."""

    namespace: str
    name: str
    event_type: DeltaType
    gvk: GroupVersionKind

    def __str__(self) -> str:
        return (
            f"req:{{ns:{self.namespace}/name:{self.name}"
            f"/type:{self.event_type}/gvk:{self.gvk}}}"
        )


class RequestQueue(Protocol):
    def put(self, item: Request) -> None: ...


@dataclass
class EventHandler:
    """Turns create, update and delete events into reconcile requests on a queue."""

    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def create(self, obj: Mapping[str, Any], queue: RequestQueue) -> None:
        self.log.info("handling Create event: %s", stringify(obj))
        self._enqueue(obj, DeltaType.ADDED, queue)

    def update(self, old: Mapping[str, Any], new: Mapping[str, Any], queue: RequestQueue) -> None:
        self.log.info("handling Update event: %s", stringify({"old": old, "new": new}))
        self._enqueue(new, DeltaType.UPDATED, queue)

    def delete(self, obj: Mapping[str, Any], queue: RequestQueue) -> None:
        self.log.info("handling Delete event: %s", stringify(obj))
        self._enqueue(obj, DeltaType.DELETED, queue)

    def generic(self, obj: Mapping[str, Any], queue: RequestQueue) -> None:
        self.log.info("ignoring Generic event: %s", stringify(obj))

    @staticmethod
    def _enqueue(obj: Mapping[str, Any], event_type: DeltaType, queue: RequestQueue) -> None:
        metadata = obj.get("metadata") or {}
        queue.put(
            Request(
                namespace=metadata.get("namespace") or "",
                name=metadata.get("name") or "",
                event_type=event_type,
                gvk=GroupVersionKind.from_object(obj),
            )
        )