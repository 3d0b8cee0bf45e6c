#!/usr/bin/env python3
"""
KubeNav Command Tests

End-to-end runs of the built-in and resource commands through the dispatcher, with
the kubernetes API classes mocked.
"""
import io
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from kubeNav.core.kobj import ObjectHandle, ObjectKind
from kubeNav.core.output import OutputWriter
from kubeNav.dispatch.dispatcher import Dispatcher
from kubeNav.modules import build_registry


@pytest.fixture
def dispatcher(env):
    return Dispatcher(build_registry(), env)


def run(dispatcher, line):
    out = OutputWriter(io.StringIO(), io.StringIO())
    ok = dispatcher.dispatch(line, out)
    return ok, out


def make_volume(make_item, name, capacity, claim=None, modes=("ReadWriteOnce",)):
    claim_ref = SimpleNamespace(namespace=claim[0], name=claim[1]) if claim else None
    spec = SimpleNamespace(capacity={"storage": capacity}, access_modes=list(modes),
                           persistent_volume_reclaim_policy="Retain", claim_ref=claim_ref,
                           storage_class_name="fast")
    return make_item(name, age=3600, spec=spec, status=SimpleNamespace(phase="Bound", reason=None))


def make_pod(make_item, name, namespace, phase="Running"):
    container_status = SimpleNamespace(ready=True, restart_count=2, state=None)
    return make_item(
        name, namespace,
        spec=SimpleNamespace(containers=[object()], node_name="node-1"),
        status=SimpleNamespace(phase=phase, container_statuses=[container_status], pod_ip="10.0.0.7"),
    )


# --- Resource listings ---
def test_pvs_renders_volume_columns(dispatcher, env, make_item):
    volumes = [
        make_volume(make_item, "pv-data", "10Gi", claim=("team", "data"), modes=("ReadWriteOnce", "ReadOnlyMany")),
        make_volume(make_item, "pv-free", "1Gi"),
    ]

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_persistent_volume.return_value = SimpleNamespace(items=volumes)
        ok, out = run(dispatcher, "pvs")

    assert ok
    header, _sep, first, second = out.lines
    for column in ("####", "Name", "Capacity", "Access Modes", "Reclaim Policy", "Claim", "Storage Class"):
        assert column in header
    assert "10Gi" in first and "RWO, ROX" in first and "team/data" in first and "Retain" in first
    assert second.split()[:2] == ["2", "pv-free"]
    assert env.row_cache == (ObjectHandle("pv-data", None, ObjectKind.PERSISTENT_VOLUME),
                             ObjectHandle("pv-free", None, ObjectKind.PERSISTENT_VOLUME))


def test_pods_list_active_namespace(dispatcher, env, make_item):
    env.set_namespace("apps")

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_namespaced_pod.return_value = SimpleNamespace(
            items=[make_pod(make_item, "web-1", "apps")])
        ok, out = run(dispatcher, "pods")

    assert ok
    assert core_v1.return_value.list_namespaced_pod.call_args[0][0] == "apps"
    assert "1/1" in out.lines[2] and "Running" in out.lines[2] and "10.0.0.7" in out.lines[2]
    assert "Namespace" not in out.lines[0]


def test_pods_all_namespaces_adds_namespace_column(dispatcher, env, make_item):
    pods = [make_pod(make_item, "web-1", "apps"), make_pod(make_item, "dns", "kube-system")]

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_pod_for_all_namespaces.return_value = SimpleNamespace(items=pods)
        ok, out = run(dispatcher, "pods -A -s Namespace")

    assert ok
    assert out.lines[0].split()[:3] == ["####", "Namespace", "Name"]
    assert env.row_cache == (ObjectHandle("web-1", "apps", ObjectKind.POD),
                             ObjectHandle("dns", "kube-system", ObjectKind.POD))


def test_listing_error_is_reported_and_keeps_rows(dispatcher, env):
    from kubernetes.client.exceptions import ApiException

    previous = (ObjectHandle("keep", "team", ObjectKind.POD),)
    env.set_row_cache(previous)

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_namespaced_service.side_effect = ApiException(status=403, reason="Forbidden")
        ok, out = run(dispatcher, "svc")

    assert ok
    assert out.lines == []
    assert len(out.errors) == 1 and "Forbidden" in out.errors[0]
    assert env.row_cache == previous


def test_invalid_filter_makes_no_request(dispatcher, env, client_factory):
    previous = (ObjectHandle("keep", "team", ObjectKind.POD),)
    env.set_row_cache(previous)

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        ok, out = run(dispatcher, "pods -r '[unclosed'")

    assert not ok
    assert "Invalid filter regex '[unclosed'" in out.errors[0]
    core_v1.assert_not_called()
    client_factory.assert_not_called()
    assert env.row_cache == previous


def test_unknown_sort_column_is_a_usage_error(dispatcher, client_factory):
    ok, out = run(dispatcher, "pvs -s Colour")

    assert not ok
    assert "invalid choice" in out.errors[0]
    client_factory.assert_not_called()


def test_sort_on_column_not_shown_is_a_usage_error(dispatcher, client_factory):
    ok, out = run(dispatcher, "pods -s Namespace")

    assert not ok
    assert "Cannot sort on 'Namespace'" in out.errors[0]
    client_factory.assert_not_called()


# --- Delete ---
def test_delete_asks_for_confirmation(dispatcher, env):
    env.set_row_cache([ObjectHandle("web-1", "team", ObjectKind.POD)])

    with patch("kubernetes.client.CoreV1Api") as core_v1, patch("builtins.input", return_value="n"):
        ok, out = run(dispatcher, "delete 1")

    assert ok
    core_v1.return_value.delete_namespaced_pod.assert_not_called()
    assert "cancelled" in out.lines[0]


def test_delete_selected_object_after_confirmation(dispatcher, env):
    env.select(ObjectHandle("web-1", "team", ObjectKind.POD))

    with patch("kubernetes.client.CoreV1Api") as core_v1, patch("builtins.input", return_value="y"):
        ok, out = run(dispatcher, "delete")

    assert ok
    assert core_v1.return_value.delete_namespaced_pod.call_args[0][:2] == ("web-1", "team")
    assert "deleted" in out.lines[0]
    assert env.selected_object is None


def test_delete_by_row_keeps_other_selection(dispatcher, env):
    selected = ObjectHandle("web-2", "team", ObjectKind.POD)
    env.set_row_cache([ObjectHandle("web-1", "team", ObjectKind.POD), selected])
    env.select(selected)

    with patch("kubernetes.client.CoreV1Api"):
        ok, _out = run(dispatcher, "delete 1 -y")

    assert ok
    assert env.selected_object == selected


def test_delete_cluster_scoped_object(dispatcher, env):
    env.set_row_cache([ObjectHandle("pv-data", None, ObjectKind.PERSISTENT_VOLUME)])

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        ok, _out = run(dispatcher, "delete 1 -y")

    assert ok
    assert core_v1.return_value.delete_persistent_volume.call_args[0][0] == "pv-data"


def test_delete_without_selection(dispatcher):
    ok, out = run(dispatcher, "delete -y")

    assert not ok
    assert out.errors


# --- Context / namespace ---
def test_context_switch_clears_rows(dispatcher, env):
    env.set_row_cache([ObjectHandle("web-1", "team", ObjectKind.POD)])

    ok, out = run(dispatcher, "ctx prod")

    assert ok
    assert env.active_context == "prod"
    assert env.row_cache is None
    assert "prod" in dispatcher.env.prompt()


def test_unknown_context_is_rejected(dispatcher, env):
    ok, out = run(dispatcher, "context staging")

    assert not ok
    assert env.active_context == "dev"
    assert "staging" in out.errors[0]


def test_contexts_marks_the_active_one(dispatcher):
    ok, out = run(dispatcher, "contexts")

    assert ok
    active = [line for line in out.lines if line.lstrip().startswith("*")]
    assert len(active) == 1 and "dev" in active[0]


def test_namespace_switch_is_validated(dispatcher, env):
    namespaces = SimpleNamespace(items=[SimpleNamespace(metadata=SimpleNamespace(name=n))
                                        for n in ("default", "apps")])

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_namespace.return_value = namespaces
        ok, out = run(dispatcher, "ns missing")
        assert not ok
        assert env.active_namespace == "team"

        ok, out = run(dispatcher, "ns apps")
        assert ok
        assert env.active_namespace == "apps"


def test_namespace_switch_when_listing_fails(dispatcher, env):
    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_namespace.side_effect = ConnectionRefusedError("refused")
        ok, out = run(dispatcher, "ns apps")

    assert ok
    assert env.active_namespace == "apps"
    assert any("switching anyway" in e for e in out.errors)


def test_namespace_without_name_goes_back_to_default(dispatcher, env):
    env.set_namespace("apps")

    ok, _out = run(dispatcher, "ns")

    assert ok
    assert env.active_namespace == "team"


# --- Selection / session ---
def test_select_and_clear(dispatcher, env):
    env.set_row_cache([ObjectHandle("a", "team", ObjectKind.POD), ObjectHandle("b", "team", ObjectKind.POD)])

    assert run(dispatcher, "select 2")[0]
    assert env.prompt() == "[dev][team][b] > "
    assert run(dispatcher, "clear")[0]
    assert env.selected_object is None


def test_select_requires_a_number(dispatcher):
    ok, out = run(dispatcher, "select abc")

    assert not ok
    assert "invalid int value" in out.errors[0]


def test_alias_is_defined_persisted_and_removed(dispatcher, env):
    ok, _out = run(dispatcher, "alias wp pods -r 'web-.*'")
    assert ok
    assert env.settings.aliases == {"wp": "pods -r 'web-.*'"}
    assert "wp" in env.settings_path.read_text(encoding="utf-8")

    ok, out = run(dispatcher, "alias")
    assert ok
    assert any("wp" in line for line in out.lines)

    assert run(dispatcher, "unalias wp")[0]
    assert env.settings.aliases == {}


def test_alias_keeps_quoting_of_its_arguments(dispatcher, env):
    namespaces = SimpleNamespace(items=[SimpleNamespace(metadata=SimpleNamespace(name=n))
                                        for n in ("default", "my ns")])

    ok, _out = run(dispatcher, 'alias sw ns "my ns"')
    assert ok
    assert env.settings.aliases["sw"] == "ns 'my ns'"

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_namespace.return_value = namespaces
        ok, out = run(dispatcher, "sw")

    assert ok, out.errors
    assert env.active_namespace == "my ns"


def test_alias_cannot_shadow_a_command(dispatcher, env):
    ok, out = run(dispatcher, "alias pods nodes")

    assert not ok
    assert "pods" not in env.settings.aliases


def test_help_lists_every_command(dispatcher):
    ok, out = run(dispatcher, "help")

    assert ok
    text = "\n".join(out.lines)
    for command in build_registry().commands():
        assert command.name in text


def test_help_for_one_command(dispatcher):
    ok, out = run(dispatcher, "? pvs")

    assert ok
    text = "\n".join(out.lines)
    assert "--regex" in text and "persistentvolumes" in text


def test_quit_requests_exit(dispatcher, env):
    assert run(dispatcher, "exit")[0]
    assert env.exit_requested
