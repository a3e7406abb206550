import pytest

from viewreconcile.client import (
    Client,
    NotFoundError,
    OperationResult,
    create_or_update,
    object_key,
)


def pod(name="testpod", namespace="testns", **content):
    obj = {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"namespace": namespace, "name": name},
    }
    obj.update(content)
    return obj


def test_object_key():
    assert object_key(pod()) == ("testns", "testpod")
    assert object_key({"metadata": {"name": "x"}}) == ("", "x")
    assert object_key({}) == ("", "")


def test_get_missing_raises():
    with pytest.raises(NotFoundError):
        Client().get(pod())


def test_create_and_get_round_trip():
    client = Client()
    obj = pod(spec={"restartPolicy": "Always"})
    client.create(obj)
    got = client.get(obj)
    assert got == obj
    got["spec"]["restartPolicy"] = "Never"
    assert client.get(obj)["spec"]["restartPolicy"] == "Always"


def test_initial_objects():
    client = Client([pod(spec={"a": 1})])
    assert client.get(pod())["spec"] == {"a": 1}


def test_create_duplicate_raises():
    client = Client([pod()])
    with pytest.raises(ValueError):
        client.create(pod())


def test_kinds_are_distinct():
    client = Client([pod()])
    other = {"apiVersion": "v1", "kind": "Service", "metadata": {"namespace": "testns", "name": "testpod"}}
    with pytest.raises(NotFoundError):
        client.get(other)


def test_update_keeps_status():
    client = Client([pod(spec={"a": 1}, status={"phase": "Running"})])
    result = client.update(pod(spec={"b": 2}, status={"phase": "Failed"}))
    assert result == pod(spec={"b": 2}, status={"phase": "Running"})
    assert client.get(pod()) == result


def test_update_missing_raises():
    with pytest.raises(NotFoundError):
        Client().update(pod())


def test_update_status_only_touches_status():
    client = Client([pod(spec={"a": 1})])
    result = client.update_status(pod(spec={"b": 2}, status={"ready": True}))
    assert result == pod(spec={"a": 1}, status={"ready": True})


def test_delete():
    client = Client([pod()])
    client.delete(pod())
    with pytest.raises(NotFoundError):
        client.get(pod())
    with pytest.raises(NotFoundError):
        client.delete(pod())


def test_patch_merges_and_removes_nulls():
    client = Client([pod(spec={"a": 1, "b": {"c": 2, "d": 3}, "l": [1, 2]})])
    merge = client.patch
    result = merge(pod(), {"spec": {"a": None, "b": {"d": 4}, "l": [3]}})
    assert result == pod(spec={"b": {"c": 2, "d": 4}, "l": [3]})


def test_patch_missing_raises():
    merge = Client().patch
    with pytest.raises(NotFoundError):
        merge(pod(), {"spec": {}})


def test_patch_status_applies_only_status():
    client = Client([pod(spec={"a": 1}, status={"x": 1})])
    result = client.patch_status(pod(), {"spec": {"a": 2}, "status": {"y": 2}})
    assert result == pod(spec={"a": 1}, status={"x": 1, "y": 2})


def test_create_or_update_creates():
    client = Client()
    obj = pod()

    def set_spec(o):
        o["spec"] = {"restartPolicy": "Always"}

    assert create_or_update(client, obj, set_spec) is OperationResult.CREATED
    assert client.get(pod())["spec"] == {"restartPolicy": "Always"}
    assert obj["spec"] == {"restartPolicy": "Always"}


def test_create_or_update_updates_with_status():
    client = Client([pod(spec={"a": 1})])
    obj = pod()

    def set_spec_and_status(o):
        assert o["spec"] == {"a": 1}
        o["spec"] = {"b": 2}
        o["status"] = {"message": "testmessage"}

    assert create_or_update(client, obj, set_spec_and_status) is OperationResult.UPDATED
    assert client.get(pod()) == pod(spec={"b": 2}, status={"message": "testmessage"})
    assert obj == pod(spec={"b": 2}, status={"message": "testmessage"})


def test_create_or_update_refuses_rename():
    client = Client()

    def rename(o):
        o["metadata"]["name"] = "other"

    with pytest.raises(ValueError):
        create_or_update(client, pod(), rename)
    with pytest.raises(NotFoundError):
        client.get(pod())