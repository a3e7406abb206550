"""Resolving resource specifications to group, version and kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .reconciler import GroupVersionKind
from .util import stringify

VIEW_GROUP = "view.dcontroller.io"
VIEW_VERSION = "v1alpha1"


class ResourceError(Exception):
    """A resource cannot be resolved to a group, version and kind."""


class RESTMapper:
    """Maps a group and a kind or resource name to a registered GVK."""

    def __init__(self, kinds: Iterable[GroupVersionKind] = ()):
        self._kinds: list[GroupVersionKind] = list(kinds)

    def kind_for(self, group: str, resource: str) -> GroupVersionKind:
        """Return the first registered GVK in ``group`` whose kind or plural matches."""
        wanted = resource.lower()
        for gvk in self._kinds:
            if gvk.group != group:
                continue
            kind = gvk.kind.lower()
            if wanted in (kind, kind + "s"):
                return gvk
        raise ResourceError(f"no matches for {group}/{resource}")


@dataclass(frozen=True)
class ResourceSpec:
    """A resource reference: kind, optional API group and optional version."""

    kind: str = ""
    group: Optional[str] = None
    version: Optional[str] = None


class Resource:
    """A resource reference bound to a mapper that can resolve it."""

    def __init__(self, mapper: Optional[RESTMapper], spec: ResourceSpec):
        self.mapper = mapper
        self.spec = spec

    def gvk(self) -> GroupVersionKind:
        """Resolve the group, version and kind, raising ResourceError on failure."""
        spec = self.spec
        if not spec.kind:
            raise ResourceError(f"empty Kind in {stringify(spec)}")
        if spec.group is None or spec.group == VIEW_GROUP:
            return self._by_group_kind(VIEW_GROUP, spec.kind)
        if spec.version is None:
            return self._by_group_kind(spec.group, spec.kind)
        return GroupVersionKind(spec.group, spec.version, spec.kind)

    def _by_group_kind(self, group: str, kind: str) -> GroupVersionKind:
        if group == VIEW_GROUP:
            return GroupVersionKind(VIEW_GROUP, VIEW_VERSION, kind)
        if self.mapper is None:
            raise ResourceError(f"cannot find GVK for {kind}.{group}: no REST mapper")
        try:
            return self.mapper.kind_for(group, kind)
        except ResourceError as err:
            raise ResourceError(f"cannot find GVK for {kind}.{group}: {err}") from err

    def __str__(self) -> str:
        try:
            gvk = self.gvk()
        except ResourceError:
            return ""
        group = gvk.group or "core"
        return f"{group}/{gvk.version}:{gvk.kind}"