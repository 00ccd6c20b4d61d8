import pytest
from typer.testing import CliRunner

from tasklane.cli.app import app
from tasklane.runtime.context import Context
from tasklane.runtime.exceptions import UnrecognizedTaskError

runner = CliRunner()

PROJECT_CONFIG = """
import tasklane as tl

async def greet(args, env, run_super):
    return f"{args['greeting']}, {args['name']}"

tl.task("greet", "Greets someone", greet) \\
    .add_optional_param("greeting", "How to greet", "Hello") \\
    .add_positional_param("name", "Who to greet")

async def which_network(args, env, run_super):
    return env.network.name

tl.task("which-network", which_network)

async def explode(args, env, run_super):
    raise RuntimeError("kaboom")

tl.task("explode", explode)

config = {
    "networks": {"local": {"endpoint": "http://127.0.0.1:9933"}},
}
"""


@pytest.fixture
def project(tmp_path, monkeypatch):
    (tmp_path / "tasklane.config.py").write_text(PROJECT_CONFIG)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_runs_a_task_and_prints_its_result(project):
    result = runner.invoke(
        app, ["--log-format", "plain", "greet", "Alice", "--greeting", "Hi"]
    )

    assert result.exit_code == 0, result.output
    assert "Hi, Alice" in result.output
    assert not Context.is_created()


def test_defaults_apply(project):
    result = runner.invoke(app, ["--log-format", "plain", "greet", "Bob"])

    assert result.exit_code == 0, result.output
    assert "Hello, Bob" in result.output


def test_global_network_option(project):
    result = runner.invoke(
        app, ["--log-format", "plain", "--network", "local", "which-network"]
    )

    assert result.exit_code == 0, result.output
    assert "local" in result.output


def test_missing_argument_is_reported(project):
    result = runner.invoke(app, ["--log-format", "plain", "greet"])

    assert result.exit_code == 1
    assert "Missing task argument 'name'" in result.output


def test_unknown_task_is_reported(project):
    result = runner.invoke(app, ["--log-format", "plain", "missing-task"])

    assert result.exit_code == 1
    assert "Unrecognized task 'missing-task'" in result.output
    assert not Context.is_created()


def test_unknown_task_option(project):
    result = runner.invoke(app, ["--log-format", "plain", "greet", "Bob", "--shout"])

    assert result.exit_code == 1
    assert "--shout" in result.output


def test_unknown_network(project):
    result = runner.invoke(app, ["--log-format", "plain", "--network", "mainnet", "greet", "Bob"])

    assert result.exit_code == 1
    assert "mainnet" in result.output


def test_stack_traces_are_shown_on_request(project):
    result = runner.invoke(app, ["--show-stack-traces", "missing-task"])

    assert result.exit_code == 1
    assert isinstance(result.exception, UnrecognizedTaskError)


def test_outside_a_project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["--log-format", "plain", "greet"])

    assert result.exit_code == 1
    assert "No tasklane config file found" in result.output


def test_help_is_the_default_task(project):
    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    assert "greet" in result.output
    assert "Greets someone" in result.output


def test_help_for_a_task(project):
    result = runner.invoke(app, ["help", "greet"])

    assert result.exit_code == 0, result.output
    assert "--greeting" in result.output


def test_json_log_format(project):
    result = runner.invoke(app, ["--log-format", "json", "greet", "Eve"])

    assert result.exit_code == 0, result.output
    assert '"event_id": "cli.result"' in result.output


def test_unexpected_error_is_reported(project):
    result = runner.invoke(app, ["--log-format", "plain", "explode"])

    assert result.exit_code == 1
    assert "An unexpected error occurred: kaboom" in result.output
    assert not Context.is_created()


def test_unexpected_error_stack_trace_on_request(project):
    result = runner.invoke(app, ["--show-stack-traces", "explode"])

    assert result.exit_code == 1
    assert isinstance(result.exception, RuntimeError)
