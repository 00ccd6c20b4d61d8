import pytest

import tasklane as tl
from tasklane.runtime.context import Context
from tasklane.runtime.exceptions import ContextNotCreatedError


def test_dsl_needs_an_active_context():
    with pytest.raises(ContextNotCreatedError):
        tl.task("t")


def test_task_with_description_and_action():
    ctx = Context.create()

    def action(args, env, run_super):
        pass

    definition = tl.task("t", "Does things", action)

    assert ctx.tasks_dsl.get("t") is definition
    assert definition.description == "Does things"
    assert definition.action is action


def test_task_with_action_only():
    Context.create()

    def action(args, env, run_super):
        pass

    definition = tl.task("t", action)

    assert definition.description is None
    assert definition.action is action


def test_internal_task():
    Context.create()

    assert tl.internal_task("hidden", "Not listed").is_internal


def test_extenders_are_registered_on_the_context():
    ctx = Context.create()

    def extender(env):
        pass

    def config_extender(resolved, user_config):
        pass

    tl.extend_environment(extender)
    tl.extend_config(config_extender)

    assert ctx.extenders_manager.get_extenders() == [extender]
    assert ctx.config_extenders == [config_extender]


def test_types_are_exposed():
    assert tl.types.int.name == "int"
