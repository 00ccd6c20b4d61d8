import io
import json

import pytest
from rich.console import Console

from tasklane.common.messaging import MessageBus, MessageStore
from tasklane.common.renderers import (
    CliRenderer,
    JsonRenderer,
    RichCliRenderer,
    create_renderer,
)


def test_message_store_loads_defaults():
    """Test that the message store loads default locale messages."""
    store = MessageStore(locale="en")
    # Only check that the data ends up in the text, not the exact wording.
    msg = store.get("task.started", task_name="compile")
    assert "compile" in msg


def test_unknown_message_and_missing_keys():
    store = MessageStore()

    assert store.get("no.such.message") == "<no.such.message>"
    assert "missing key" in store.get("task.started")


def test_locale_files_merge_and_broken_ones_are_skipped(tmp_path):
    (tmp_path / "fr").mkdir()
    (tmp_path / "fr" / "a.json").write_text('{"greet": "Bonjour {name}"}')
    (tmp_path / "fr" / "b.json").write_text("{not json")

    store = MessageStore(locale="fr", locales_dir=tmp_path)

    assert store.get("greet", name="Ana") == "Bonjour Ana"
    assert MessageStore(locale="xx", locales_dir=tmp_path).templates == {}


def test_message_bus_renderer_delegation():
    """Test that the bus delegates to the renderer."""
    store = MessageStore()
    store.templates["test.msg"] = "Value: {val}"
    bus = MessageBus(store)

    received = []

    class MockRenderer:
        def render(self, msg_id, level, **kwargs):
            received.append((msg_id, level, kwargs))

    bus.set_renderer(MockRenderer())

    bus.info("test.msg", val=42)

    assert len(received) == 1
    assert received[0][0] == "test.msg"
    assert received[0][1] == "info"
    assert received[0][2]["val"] == 42


def test_bus_without_renderer_is_silent():
    MessageBus(MessageStore()).error("cli.error", error="ignored")


def test_cli_renderer_filters_by_level():
    store = MessageStore()
    stream = io.StringIO()
    renderer = CliRenderer(store, stream=stream, min_level="WARNING")

    renderer.render("task.started", "info", task_name="hidden")
    renderer.render("cli.error", "error", error="shown")

    assert stream.getvalue() == "Error: shown\n"


def test_json_renderer():
    stream = io.StringIO()
    renderer = JsonRenderer(stream=stream, min_level="DEBUG")

    renderer.render("task.started", "debug", task_name="compile")

    record = json.loads(stream.getvalue())
    assert record["level"] == "DEBUG"
    assert record["event_id"] == "task.started"
    assert record["data"] == {"task_name": "compile"}


def test_rich_renderer_does_not_interpret_markup():
    console = Console(record=True, width=80)
    renderer = RichCliRenderer(MessageStore(), console=console)

    renderer.render("cli.error", "error", error="[bold]not markup[/bold]")

    assert "[bold]not markup[/bold]" in console.export_text()


@pytest.mark.parametrize("level", ["debug", "info", "warning", "error"])
def test_rich_renderer_styles_levels_on_a_plain_console(level):
    console = Console(record=True, width=80)
    renderer = RichCliRenderer(MessageStore(), min_level="DEBUG", console=console)

    renderer.render("cli.error", level, error="boom")

    assert "Error: boom" in console.export_text()


def test_create_renderer():
    store = MessageStore()

    assert isinstance(create_renderer(store, "json"), JsonRenderer)
    assert isinstance(create_renderer(store, "plain"), CliRenderer)
    assert isinstance(create_renderer(store, "human"), RichCliRenderer)
