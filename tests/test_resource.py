import pytest

from viewreconcile.reconciler import GroupVersionKind
from viewreconcile.resource import (
    RESTMapper,
    Resource,
    ResourceError,
    ResourceSpec,
)

DEPLOYMENT = GroupVersionKind("apps", "v1", "Deployment")


@pytest.fixture
def mapper():
    return RESTMapper([GroupVersionKind("", "v1", "Pod"), DEPLOYMENT])


def test_view_resource_gets_view_gvk(mapper):
    res = Resource(mapper, ResourceSpec(kind="view"))
    assert res.gvk() == GroupVersionKind("view.dcontroller.io", "v1alpha1", "view")


def test_explicit_view_group_enforces_version(mapper):
    res = Resource(mapper, ResourceSpec(kind="view", group="view.dcontroller.io", version="v9"))
    assert res.gvk() == GroupVersionKind("view.dcontroller.io", "v1alpha1", "view")


def test_view_resource_str(mapper):
    assert str(Resource(mapper, ResourceSpec(kind="view"))) == "view.dcontroller.io/v1alpha1:view"


def test_native_resource_with_version(mapper):
    res = Resource(mapper, ResourceSpec(kind="Pod", group="", version="v1"))
    assert res.gvk() == GroupVersionKind("", "v1", "Pod")


def test_core_group_is_named_core_in_str():
    res = Resource(None, ResourceSpec(kind="Pod", group="", version="v1"))
    assert str(res) == "core/v1:Pod"


def test_native_resource_without_version_uses_mapper(mapper):
    res = Resource(mapper, ResourceSpec(kind="Deployment", group="apps"))
    assert res.gvk() == DEPLOYMENT


def test_unknown_kind_raises(mapper):
    res = Resource(mapper, ResourceSpec(kind="Gadget", group="apps"))
    with pytest.raises(ResourceError):
        res.gvk()
    assert str(res) == ""


def test_missing_mapper_raises():
    with pytest.raises(ResourceError):
        Resource(None, ResourceSpec(kind="Deployment", group="apps")).gvk()


def test_empty_kind_raises(mapper):
    res = Resource(mapper, ResourceSpec())
    with pytest.raises(ResourceError, match="empty Kind"):
        res.gvk()
    assert str(res) == ""


def test_mapper_matches_plural_and_case(mapper):
    assert mapper.kind_for("", "pods") == GroupVersionKind("", "v1", "Pod")
    assert mapper.kind_for("apps", "deployment") == DEPLOYMENT


def test_mapper_respects_group(mapper):
    with pytest.raises(ResourceError):
        mapper.kind_for("apps", "Pod")