# viewreconcile

Building blocks for controllers that watch Kubernetes-style objects and
write results back. Objects are plain nested dictionaries with
`apiVersion`, `kind`, `metadata` and the rest of the content. The package
has no dependencies outside the standard library.

## Modules

### `viewreconcile.resource`

- `ResourceSpec(kind, group=None, version=None)` names a resource.
- `Resource(mapper, spec)` resolves it with `gvk()` to a `GroupVersionKind`:
  - no group, or the group `view.dcontroller.io`: a view, always at
    version `v1alpha1`;
  - a group and a version: used as given;
  - a group but no version: looked up with `RESTMapper.kind_for`.
  An empty kind, a missing mapper or a failed lookup raises `ResourceError`.
  `str(resource)` gives `group/version:Kind` (`core` for the empty group),
  or an empty string when the resource cannot be resolved.
- `RESTMapper(kinds)` holds a list of known `GroupVersionKind` values;
  `kind_for(group, resource)` matches the kind or its plural
  (`Pod` or `pods`), ignoring case.

### `viewreconcile.reconciler`

- `DeltaType` (`Added`, `Updated`, `Deleted`, `Replaced`, `Sync`,
  `Upserted`) and `Delta(type, object)`.
- `GroupVersionKind(group, version, kind)`, with `api_version` and
  `GroupVersionKind.from_object(obj)`.
- `Request(namespace, name, event_type, gvk)`; `str(request)` gives
  `req:{ns:<ns>/name:<name>/type:<type>/gvk:<gvk>}`.
- `EventHandler`: `create`, `update` and `delete` put a `Request` with
  `Added`, `Updated` or `Deleted` on a queue (any object with `put`);
  `update` uses the new object. `generic` only logs.

### `viewreconcile.source`

- `SourceSpec(resource, predicate=None, label_selector=None, namespace=None)`.
- `LabelSelector(match_labels, match_expressions)`; `matches(labels)`
  supports the operators `In`, `NotIn`, `Exists` and `DoesNotExist`.
- `Source(mapper, spec).get_source()` returns a `WatchSource` holding the
  GVK, the filters and an `EventHandler`. `WatchSource.matches(obj)` is
  true when the object has that GVK and passes the predicate, the label
  selector and the namespace. An invalid selector expression raises
  `ValueError`.

### `viewreconcile.client`

- `Client(objects=())` keeps objects in memory, keyed by group, kind,
  namespace and name. It offers `get`, `create`, `update`,
  `update_status`, `delete`, `patch` and `patch_status`. A missing object
  raises `NotFoundError`; creating an existing one raises `ValueError`.
  `update` keeps the stored status, `update_status` changes only the
  status, and `patch` applies a JSON merge patch to the whole object.
- `object_key(obj)` returns `(namespace, name)`.
- `create_or_update(client, obj, mutate)` fetches the stored object into
  `obj` (if there is one), calls `mutate(obj)`, then creates or updates it
  and returns an `OperationResult` (`created` or `updated`). On update a
  status set by `mutate` is written through `update_status`. `mutate` may
  not change the name or namespace (`ValueError`).

### `viewreconcile.target`

- `TargetSpec(resource, type="")` and `Target(mapper, client, spec)`.
  `Target.write(delta)` sets the resolved GVK on a copy of the delta
  object and writes it:
  - *Updater* (`TargetType.UPDATER`, also the empty type): for `Added`,
    `Updated`, `Upserted` and `Replaced` it creates or updates the object,
    dropping top-level fields the delta object no longer has and merging
    labels and annotations into those already there (they are never
    removed). `Deleted` deletes the object.
  - *Patcher* (`TargetType.PATCHER`): for the write types it merge-patches
    the existing object (which must exist) and then the status. For
    `Deleted` it sends a merge patch that nulls every leaf the delta object
    holds, keeping the GVK, namespace and name; a missing object is
    ignored.
  Other delta types are ignored. A delta without an object or an unknown
  target type raises `ValueError`.
- `remove_nested_map`, `remove_nested_list` and `merge_metadata` are the
  helpers behind this.

### `viewreconcile.util`

- `stringify(value)` renders a value as compact JSON with sorted keys
  (dataclasses and enums included), or its `repr` if it cannot be encoded.
- `map_list(func, items)` maps a function over items into a list.

## Example

```python
from viewreconcile.client import Client
from viewreconcile.reconciler import Delta, DeltaType
from viewreconcile.resource import RESTMapper, ResourceSpec
from viewreconcile.target import Target, TargetSpec, TargetType

client = Client()
target = Target(RESTMapper(), client, TargetSpec(ResourceSpec(kind="view")))

view = {"metadata": {"namespace": "default", "name": "viewname"}, "a": 1}
target.write(Delta(DeltaType.ADDED, view))

patcher = Target(
    RESTMapper(), client,
    TargetSpec(ResourceSpec(kind="view"), type=TargetType.PATCHER),
)
patcher.write(Delta(DeltaType.UPDATED, {**view, "b": 2}))
```

## What it does not do

There is no connection to a cluster or API server: the `Client` is an
in-memory store. There is no controller manager, work queue runner,
informer or watch loop that feeds events to an `EventHandler` or runs
pipelines on them, and no command-line program. Callers wire these pieces
together themselves.

## Running the tests

```
pip install -e ".[test]"
pytest
```