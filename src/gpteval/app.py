import argparse
import asyncio
import logging
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Log, Static, TextArea
from textual.widgets.text_area import Selection as TextAreaSelection

from gpteval.config import GPTEvalConfig, load_config
from gpteval.document import Position, Range, Selection, TextDocument, TextEdit
from gpteval.errors import ConfigError
from gpteval.providers import ProviderBase
from gpteval.repl import Repl, create_repl

FEEDBACK_SECONDS = 0.25


class TextAreaDocument:
    """``Document`` over a textual ``TextArea``."""

    def __init__(self, text_area: TextArea):
        self.text_area = text_area

    @property
    def line_count(self) -> int:
        return self.text_area.document.line_count

    def line_at(self, line: int) -> str:
        return self.text_area.document.get_line(line)

    @property
    def selection(self) -> Selection:
        start, end = self.text_area.selection
        return Selection(Position(*start), Position(*end))

    @selection.setter
    def selection(self, value: Selection) -> None:
        self.text_area.selection = TextAreaSelection(
            (value.anchor.line, value.anchor.character),
            (value.active.line, value.active.character),
        )

    def get_text(self, range: Range) -> str:
        return self.text_area.get_text_range(
            (range.start.line, range.start.character),
            (range.end.line, range.end.character),
        )

    def apply_edit(self, edit: TextEdit) -> None:
        # The editor is locked while an evaluation is in flight.
        read_only = self.text_area.read_only
        self.text_area.read_only = False
        try:
            if edit.range is not None:
                self.text_area.replace(
                    edit.text,
                    (edit.range.start.line, edit.range.start.character),
                    (edit.range.end.line, edit.range.end.character),
                )
            else:
                assert edit.position is not None
                self.text_area.insert(
                    edit.text, (edit.position.line, edit.position.character)
                )
        finally:
            self.text_area.read_only = read_only


class GPTEvalApp(App):
    TITLE = "GPTEval"

    CSS = """
    #editor {
        height: 1fr;
    }
    #output {
        height: 8;
        border-top: solid $primary;
    }
    #status {
        height: 1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("f5", "evaluate", "Eval", priority=True),
        Binding("f6", "evaluate_line", "Eval line", priority=True),
        Binding("f8", "kill", "Kill", priority=True),
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("f2", "toggle_output", "Output"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: GPTEvalConfig,
        path: Path | None = None,
        workspace_roots: list[Path] | None = None,
        provider: ProviderBase | None = None,
    ):
        self.config = config
        self.path = path
        self.workspace_roots = workspace_roots
        self.provider = provider
        self.repl: Repl | None = None
        super().__init__()

    def compose(self) -> ComposeResult:
        text = ""
        if self.path is not None and self.path.exists():
            text = self.path.read_text(encoding="utf-8")
        yield TextArea(text, id="editor")
        yield Log(id="output")
        yield Static(id="status")
        yield Footer()

    def on_mount(self) -> None:
        editor = self.query_one("#editor", TextArea)
        try:
            self.repl = create_repl(
                self.config,
                TextAreaDocument(editor),
                workspace_roots=self.workspace_roots,
                provider=self.provider,
                on_output=self.write_output,
                on_feedback=self.flash_feedback,
            )
        except ConfigError as e:
            self.notify(str(e), severity="error", timeout=10)
        editor.focus()
        self.update_status()

    def write_output(self, text: str) -> None:
        self.query_one("#output", Log).write_line(text)

    def flash_feedback(self, range: Range) -> None:
        status = self.query_one("#status", Static)
        status.styles.background = self.config.feedback_color
        self.set_timer(FEEDBACK_SECONDS, self._clear_feedback)

    def _clear_feedback(self) -> None:
        self.query_one("#status", Static).styles.background = None

    def update_status(self, busy: bool = False) -> None:
        name = self.path.name if self.path else "[scratch]"
        parts = [name]
        if busy:
            parts.append("evaluating...")
        if self.repl and self.config.show_eval_count:
            parts.append(f"{self.config.eval_count_prefix}{self.repl.history.eval_count}")
        self.query_one("#status", Static).update("  ".join(parts))

    async def _evaluate(self, multiline: bool) -> None:
        if self.repl is None or self.repl.busy:
            return
        editor = self.query_one("#editor", TextArea)
        editor.read_only = True
        self.update_status(busy=True)
        try:
            await self.repl.evaluate(multiline)
        finally:
            editor.read_only = False
            self.update_status()

    def action_evaluate(self) -> None:
        self.run_worker(self._evaluate(True), group="evaluate")

    def action_evaluate_line(self) -> None:
        self.run_worker(self._evaluate(False), group="evaluate")

    async def action_kill(self) -> None:
        if self.repl is not None:
            await self.repl.kill()
            self.update_status()

    def action_save(self) -> None:
        if self.path is None:
            self.notify("No file to save to", severity="warning")
            return
        self.path.write_text(self.query_one("#editor", TextArea).text, encoding="utf-8")
        self.notify(f"Saved {self.path}")

    def action_toggle_output(self) -> None:
        output = self.query_one("#output", Log)
        output.display = not output.display


def evaluate_file(
    config: GPTEvalConfig,
    path: Path,
    line: int,
    multiline: bool,
    workspace_roots: list[Path] | None = None,
) -> bool:
    """Evaluate the block at ``line`` of ``path`` and write the file back.

    Returns True if the file was updated.
    """
    text = path.read_text(encoding="utf-8") if path.exists() else ""
    document = TextDocument.from_text(text, Selection.cursor(Position(line, 0)))
    if not 0 <= line < document.line_count:
        print(f"Line {line} is outside {path} (0..{document.line_count - 1})", file=sys.stderr)
        return False
    repl = create_repl(config, document, workspace_roots=workspace_roots, on_output=print)
    block = asyncio.run(repl.evaluate(multiline))
    if block is None:
        return False
    path.write_text(document.text, encoding="utf-8")
    return True


def main():
    """Main entry point for the gpteval command."""
    parser = argparse.ArgumentParser()
    parser.add_argument("file", nargs="?", default=None, help="Document to edit")
    parser.add_argument(
        "--workspace",
        default=None,
        help="Workspace root for prompt.txt (defaults to the document's directory)",
    )
    parser.add_argument("--prompt", default=None, help="Prompt template file")
    parser.add_argument("--model", default=None, help="Model to use")
    parser.add_argument(
        "--line",
        type=int,
        default=None,
        help="Evaluate the block at this zero-based line without opening the editor",
    )
    parser.add_argument(
        "--single-line", action="store_true", help="With --line, evaluate only that line"
    )
    parser.add_argument(
        "--logging", action="store_true", default=None, help="Enable logging"
    )
    args = parser.parse_args()

    # Load configuration from ~/.config/gpteval/init.py
    config, config_error = load_config()

    # Command-line arguments override config
    if args.prompt is not None:
        config.prompt_path = args.prompt
    if args.model is not None:
        if config.provider == "anthropic":
            config.anthropic_model = args.model
        else:
            config.openai_model = args.model
    if args.logging:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            filename="gpteval.log",
            filemode="a",  # append mode
        )
        logging.getLogger("gpteval").setLevel(logging.DEBUG)

    path = Path(args.file).expanduser() if args.file else None
    if args.workspace is not None:
        workspace_roots = [Path(args.workspace).expanduser()]
    elif path is not None:
        workspace_roots = [path.resolve().parent]
    else:
        workspace_roots = []

    if args.line is not None:
        if path is None:
            parser.error("--line requires a file")
        if config_error:
            print(f"Config error: {config_error}", file=sys.stderr)
        try:
            updated = evaluate_file(
                config, path, args.line, not args.single_line, workspace_roots
            )
        except ConfigError as e:
            print(f"Config error: {e}", file=sys.stderr)
            sys.exit(2)
        sys.exit(0 if updated else 1)

    app = GPTEvalApp(config, path, workspace_roots)

    # Show config error if any (as a notification once app starts)
    if config_error:
        app.call_later(
            lambda: app.notify(
                f"Config error: {config_error}", severity="warning", timeout=10
            )
        )

    app.run()


if __name__ == "__main__":
    main()
