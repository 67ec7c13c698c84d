"""Tests for the textual front end and the headless entry point."""

import pytest
from textual.widgets import TextArea

from gpteval.app import GPTEvalApp, evaluate_file
from gpteval.config import GPTEvalConfig


def simulated_config():
    config = GPTEvalConfig()
    config.provider = "simulated"
    return config


@pytest.mark.asyncio
async def test_evaluate_writes_result(tmp_path, provider):
    path = tmp_path / "notes.txt"
    path.write_text("--question\n")
    app = GPTEvalApp(simulated_config(), path, [tmp_path], provider=provider)

    async with app.run_test() as pilot:
        await pilot.press("f5")
        await app.workers.wait_for_complete()
        await pilot.pause()
        editor = app.query_one("#editor", TextArea)
        assert editor.text == "--question\nthe answer\n"
        assert editor.read_only is False
        assert editor.selection.end == (0, 0)

    assert app.repl.history.eval_count == 1


@pytest.mark.asyncio
async def test_save(tmp_path, provider):
    path = tmp_path / "notes.txt"
    path.write_text("--question\n")
    app = GPTEvalApp(simulated_config(), path, [tmp_path], provider=provider)

    async with app.run_test() as pilot:
        await pilot.press("f5")
        await app.workers.wait_for_complete()
        await pilot.pause()
        await pilot.press("ctrl+s")
        await pilot.pause()

    assert path.read_text() == "--question\nthe answer\n"


@pytest.mark.asyncio
async def test_kill_counts(tmp_path, provider):
    app = GPTEvalApp(simulated_config(), None, [], provider=provider)
    async with app.run_test() as pilot:
        await pilot.press("f8")
        await pilot.pause()
    assert app.repl.history.eval_count == 1
    assert provider.calls == []


def test_evaluate_file_headless(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "gpteval.repl.create_provider",
        lambda config: _answering("4"),
    )
    path = tmp_path / "math.txt"
    path.write_text("--what is 2+2\n\n--unrelated\n")

    assert evaluate_file(simulated_config(), path, 0, multiline=True) is True
    assert path.read_text() == "--what is 2+2\n4\n\n--unrelated\n"


def test_evaluate_file_line_out_of_range(tmp_path):
    path = tmp_path / "math.txt"
    path.write_text("--q\n")
    assert evaluate_file(simulated_config(), path, 10, multiline=True) is False
    assert path.read_text() == "--q\n"


def test_evaluate_file_blank_line(tmp_path):
    path = tmp_path / "math.txt"
    path.write_text("--q\n\n")
    assert evaluate_file(simulated_config(), path, 1, multiline=False) is False


def _answering(text):
    from gpteval.providers import SimulatedProvider

    provider = SimulatedProvider()
    provider.set_default_response(text)
    return provider
