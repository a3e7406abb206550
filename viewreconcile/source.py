"""Watch sources: which objects to watch and how their events become requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from .reconciler import EventHandler, GroupVersionKind
from .resource import Resource, ResourceSpec, RESTMapper

_log = logging.getLogger(__name__)

Predicate = Callable[[Mapping[str, Any]], bool]

_OPERATORS = ("In", "NotIn", "Exists", "DoesNotExist")


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    metadata = obj.get("metadata")
    return metadata if isinstance(metadata, Mapping) else {}


@dataclass
class LabelSelector:
    """Label equality requirements plus set-based expressions."""

    match_labels: Mapping[str, str] = field(default_factory=dict)
    match_expressions: Sequence[Mapping[str, Any]] = ()

    def _validate(self) -> None:
        for expr in self.match_expressions:
            key = expr.get("key")
            operator = expr.get("operator")
            values = list(expr.get("values") or [])
            if not key:
                raise ValueError("label selector expression without a key")
            if operator not in _OPERATORS:
                raise ValueError(f"{operator!r} is not a valid label selector operator")
            if operator in ("In", "NotIn") and not values:
                raise ValueError(f"values must be non-empty for operator {operator}")
            if operator in ("Exists", "DoesNotExist") and values:
                raise ValueError(f"values must be empty for operator {operator}")

    def matches(self, labels: Optional[Mapping[str, str]]) -> bool:
        """Tell whether a set of labels satisfies the selector."""
        labels = labels or {}
        if any(labels.get(key) != value for key, value in self.match_labels.items()):
            return False
        return all(_requirement_matches(expr, labels) for expr in self.match_expressions)


def _requirement_matches(expr: Mapping[str, Any], labels: Mapping[str, str]) -> bool:
    key = expr.get("key")
    operator = expr.get("operator")
    values = set(expr.get("values") or [])
    if operator == "In":
        return key in labels and labels[key] in values
    if operator == "NotIn":
        return key not in labels or labels[key] not in values
    if operator == "Exists":
        return key in labels
    if operator == "DoesNotExist":
        return key not in labels
    raise ValueError(f"{operator!r} is not a valid label selector operator")


@dataclass
class SourceSpec:
    """What to watch: a resource, optionally filtered by predicate, labels and namespace."""

    resource: ResourceSpec = field(default_factory=ResourceSpec)
    predicate: Optional[Predicate] = None
    label_selector: Optional[LabelSelector] = None
    namespace: Optional[str] = None


@dataclass
class WatchSource:
    """A ready watch: the GVK to follow, the filters and the handler for events."""

    gvk: GroupVersionKind
    predicates: tuple[Predicate, ...] = ()
    handler: EventHandler = field(default_factory=EventHandler)

    def matches(self, obj: Mapping[str, Any]) -> bool:
        """Tell whether an object belongs to this watch and passes every filter."""
        if GroupVersionKind.from_object(obj) != self.gvk:
            return False
        return all(predicate(obj) for predicate in self.predicates)


class Source(Resource):
    """A watch source built from a source specification."""

    def __init__(self, mapper: Optional[RESTMapper], spec: SourceSpec):
        super().__init__(mapper, spec.resource)
        self.source = spec

    def get_source(self) -> WatchSource:
        """Resolve the GVK and build the filters; raise on an invalid specification."""
        gvk = self.gvk()

        predicates: list[Predicate] = []
        if self.source.predicate is not None:
            predicates.append(self.source.predicate)

        selector = self.source.label_selector
        if selector is not None:
            selector._validate()
            predicates.append(lambda obj: selector.matches(_metadata(obj).get("labels")))

        namespace = self.source.namespace
        if namespace is not None:
            predicates.append(lambda obj: (_metadata(obj).get("namespace") or "") == namespace)

        _log.debug("watch source %s ready: GVK %s, %d predicates", self, gvk, len(predicates))
        return WatchSource(gvk=gvk, predicates=tuple(predicates), handler=EventHandler())

    def __str__(self) -> str:
        return super().__str__()