"""Modal used to surface fatal visualizer startup errors."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label


class ErrorModal(ModalScreen[None]):
    """Show a titled error message until the user acknowledges it."""

    DEFAULT_CSS = """
    ErrorModal {
        align: center middle;
    }

    #modal-body {
        width: 60;
        height: auto;
        border: heavy $error;
        padding: 1 2;
    }

    #modal-title {
        text-style: bold;
    }
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("enter", "close", "Close"),
    ]

    def __init__(self, message: str, *, title: str = "Visualizer error") -> None:
        super().__init__()
        self._title = title
        self._message = message

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(self._title, id="modal-title"),
            Label(self._message, id="modal-message"),
            Button("OK", id="ok"),
            id="modal-body",
        )

    def on_mount(self) -> None:
        self.query_one("#ok", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        del event
        self.action_close()

    def action_close(self) -> None:
        self.dismiss(None)
