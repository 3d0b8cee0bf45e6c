#!/usr/bin/env python3
"""
KubeNav Dispatch Tests

Line tokenizing, registry construction and the guarantees of Dispatcher.dispatch.
"""
import io
from unittest.mock import Mock, patch

import pytest

from kubeNav.core.errors import DuplicateCommandError, InputError, RegistryFrozenError, UsageError
from kubeNav.core.kobj import ObjectHandle, ObjectKind
from kubeNav.core.output import OutputWriter
from kubeNav.dispatch.command import Command, arg
from kubeNav.dispatch.command_registry import CommandRegistry
from kubeNav.dispatch.dispatcher import Dispatcher
from kubeNav.modules import build_registry
from kubeNav.parser.line_parser import tokenize, tokenize_partial


def new_writer():
    return OutputWriter(io.StringIO(), io.StringIO())


def recording_registry(executor, **kwargs):
    registry = CommandRegistry()
    registry.register(Command(
        name="pods",
        aliases=["pod"],
        about="test",
        arguments=[arg("-r", "--regex"), arg("-R", "--reverse", action="store_true")],
        executor=executor,
        **kwargs,
    ))
    registry.freeze()
    return registry


# --- Tokenizer ---
def test_tokenize_plain_words():
    assert tokenize("  pods   -r web  ") == ["pods", "-r", "web"]


def test_tokenize_quotes_and_escapes():
    assert tokenize('pods -r "web .*"') == ["pods", "-r", "web .*"]
    assert tokenize("alias p 'pods -s Age'") == ["alias", "p", "pods -s Age"]
    assert tokenize("a'b c'd") == ["ab cd"]
    assert tokenize(r'x\ y "say \"hi\""') == ["x y", 'say "hi"']
    assert tokenize("") == []


def test_tokenize_unterminated_quote_is_usage_error():
    with pytest.raises(UsageError):
        tokenize('pods -r "web')


def test_tokenize_partial_tolerates_open_quote_and_trailing_space():
    assert tokenize_partial('pods -r "we') == ["pods", "-r", "we"]
    assert tokenize_partial("ns ") == ["ns", ""]
    assert tokenize_partial("") == [""]


# --- Registry ---
def test_duplicate_name_or_alias_fails_at_registration():
    registry = CommandRegistry()
    registry.register(Command(name="pods", aliases=["po"], about="", executor=Mock()))

    with pytest.raises(DuplicateCommandError):
        registry.register(Command(name="po", about="", executor=Mock()))
    with pytest.raises(DuplicateCommandError):
        registry.register(Command(name="other", aliases=["pods"], about="", executor=Mock()))


def test_frozen_registry_rejects_registration():
    registry = CommandRegistry()
    registry.freeze()

    with pytest.raises(RegistryFrozenError):
        registry.register(Command(name="pods", about="", executor=Mock()))


def test_build_registry_is_built_once_and_frozen():
    registry = build_registry()

    assert registry is build_registry()
    assert registry.frozen
    for name in ["pods", "pod", "pvs", "ns", "namespace", "context", "ctx", "select", "delete", "quit"]:
        assert registry.lookup(name) is not None, name


# --- Dispatch ---
def test_unknown_command_reports_and_does_nothing(env):
    executor = Mock()
    dispatcher = Dispatcher(recording_registry(executor), env)
    out = new_writer()

    assert not dispatcher.dispatch("podz", out)

    assert "Unknown command 'podz'" in out.errors[0]
    executor.assert_not_called()


def test_alias_resolves_to_same_command(env):
    executor = Mock()
    dispatcher = Dispatcher(recording_registry(executor), env)

    assert dispatcher.dispatch("pod -r web", new_writer())

    args, passed_env, _ = executor.call_args[0]
    assert args.regex == "web"
    assert passed_env is env


def test_bad_arguments_abort_before_execution(env, client_factory):
    executor = Mock()
    dispatcher = Dispatcher(recording_registry(executor), env)
    out = new_writer()

    assert not dispatcher.dispatch("pods --bogus", out)

    assert "unrecognized arguments" in out.errors[0]
    executor.assert_not_called()
    client_factory.assert_not_called()


def test_help_flag_prints_usage_without_executing(env):
    executor = Mock()
    dispatcher = Dispatcher(recording_registry(executor), env)
    out = new_writer()

    assert dispatcher.dispatch("pods -h", out)

    assert any("usage: pods" in line for line in out.lines)
    executor.assert_not_called()


def test_each_invocation_gets_a_fresh_writer(env):
    writers = []
    dispatcher = Dispatcher(recording_registry(lambda args, e, w: writers.append(w)), env)

    dispatcher.dispatch("pods")
    dispatcher.dispatch("pods")

    assert len(writers) == 2
    assert writers[0] is not writers[1]


def test_user_alias_expands_before_parsing(env):
    executor = Mock()
    dispatcher = Dispatcher(recording_registry(executor), env)
    env.settings.aliases["webpods"] = "pods -r 'web-.*'"

    assert dispatcher.dispatch("webpods -R", new_writer())

    args = executor.call_args[0][0]
    assert args.regex == "web-.*"
    assert args.reverse


def test_busy_flag_is_held_only_while_executing(env):
    seen = []
    dispatcher = Dispatcher(recording_registry(lambda args, e, w: seen.append(dispatcher.busy)), env)

    dispatcher.dispatch("pods")

    assert seen == [True]
    assert not dispatcher.busy


def test_failing_command_does_not_escape_dispatch(env):
    def explode(args, e, w):
        raise RuntimeError("boom")

    dispatcher = Dispatcher(recording_registry(explode), env)
    out = new_writer()

    assert not dispatcher.dispatch("pods", out)
    assert "RuntimeError - boom" in out.errors[0]
    assert not dispatcher.busy


def test_input_errors_from_executor_are_reported(env):
    def reject(args, e, w):
        raise InputError("nope")

    dispatcher = Dispatcher(recording_registry(reject), env)
    out = new_writer()

    assert not dispatcher.dispatch("pods", out)
    assert out.errors == ["❌ nope"]


def test_bare_number_selects_row(env):
    dispatcher = Dispatcher(build_registry(), env)
    env.set_row_cache([ObjectHandle("a", "team", ObjectKind.POD), ObjectHandle("b", "team", ObjectKind.POD)])

    assert dispatcher.dispatch("2", new_writer())
    assert env.selected_object.name == "b"


def test_number_without_listing_reports_no_prior_listing(env):
    dispatcher = Dispatcher(build_registry(), env)
    out = new_writer()

    assert not dispatcher.dispatch("1", out)
    assert "No prior listing" in out.errors[0]


def test_interrupted_listing_leaves_environment_unchanged(env):
    """Ctrl-C during the request returns to the prompt with nothing changed"""
    dispatcher = Dispatcher(build_registry(), env)
    previous_rows = (ObjectHandle("a", "team", ObjectKind.POD),)
    env.set_row_cache(previous_rows)
    before = (env.active_context, env.active_namespace, env.row_cache)
    out = new_writer()

    with patch("kubernetes.client.CoreV1Api") as core_v1:
        core_v1.return_value.list_namespaced_pod.side_effect = KeyboardInterrupt
        assert not dispatcher.dispatch("pods", out)

    assert out.errors == ["❌ Interrupted"]
    assert (env.active_context, env.active_namespace, env.row_cache) == before
    assert not dispatcher.busy
