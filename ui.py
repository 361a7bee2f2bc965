# ui.py
"""
Interfaz de terminal.

Muestra la gráfica en un panel a pantalla completa, recoge el tamaño de
la vista para el hilo de medición y ofrece diálogos para cambiar de
servidor. El hilo de medición solo se comunica con la interfaz mediante
mensajes de Textual, que se encolan sin bloquear.
"""

from typing import ClassVar, List, Optional, TextIO

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Footer, Input, OptionList, Static

from data_collector import SessionController, UIBridge
from models import MeasurementConfig, ServerEntry
from server_list import (
    ServerListError, describe_server, load_server_list, server_to_config,
)
from shared_state import SharedState


class GraphUpdated(Message):
    def __init__(self, text: str) -> None:
        super().__init__()
        self.text = text


class TitleUpdated(Message):
    def __init__(self, title: str) -> None:
        super().__init__()
        self.title = title


class TextualBridge(UIBridge):
    """Entrega texto a la aplicación desde otro hilo (post_message es thread-safe)."""
    def __init__(self, app: App) -> None:
        self.app = app

    def set_content(self, text: str) -> None:
        self.app.post_message(GraphUpdated(text))

    def set_title(self, title: str) -> None:
        self.app.post_message(TitleUpdated(title))


class ServerInputDialog(ModalScreen[Optional[str]]):
    """Pide un servidor a mano."""

    DEFAULT_CSS = """
    ServerInputDialog {
        align: center middle;
    }
    #dialog {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1;
    }
    """

    BINDINGS: ClassVar[list] = [("escape", "cancel", "Cancelar")]

    def __init__(self, current: Optional[str] = None) -> None:
        super().__init__()
        self._current = current or ""

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static("Servidor iperf3 (IP o hostname):")
            yield Input(value=self._current, placeholder="iperf.example.com", id="server")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value.strip() or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ServerListDialog(ModalScreen[Optional[ServerEntry]]):
    """Menú con la lista pública de servidores."""

    DEFAULT_CSS = """
    ServerListDialog {
        align: center middle;
    }
    #servers {
        width: 90%;
        height: 80%;
        border: thick $primary;
        background: $surface;
    }
    """

    BINDINGS: ClassVar[list] = [("escape", "cancel", "Cancelar")]

    def __init__(self, entries: List[ServerEntry]) -> None:
        super().__init__()
        self._entries = entries

    def compose(self) -> ComposeResult:
        yield OptionList(*[describe_server(e) for e in self._entries], id="servers")

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(self._entries[event.option_index])

    def action_cancel(self) -> None:
        self.dismiss(None)


class Iperf3Dashboard(App):
    """Panel con la gráfica en vivo de iperf3."""

    TITLE = "iperf3-tui"

    CSS = """
    #panel {
        border: round $accent;
        height: 1fr;
    }
    #graph {
        height: 1fr;
        overflow: hidden;
    }
    """

    BINDINGS: ClassVar[list] = [
        Binding("q", "quit_app", "Salir"),
        Binding("e", "enter_server", "Introducir servidor"),
        Binding("s", "pick_server", "Lista de servidores"),
        Binding("r", "restart", "Reiniciar"),
    ]

    def __init__(
        self,
        state: SharedState,
        log_file: Optional[TextIO] = None,
        servers_url: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.state = state
        self.log_file = log_file
        self.servers_url = servers_url
        self.controller: Optional[SessionController] = None

    def compose(self) -> ComposeResult:
        with Container(id="panel"):
            yield Static(Text("Iniciando..."), id="graph")
        yield Footer()

    def on_mount(self) -> None:
        self._save_viewport()
        # Como el original: se refresca el tamaño una vez por segundo
        self.set_interval(1.0, self._save_viewport)
        self.controller = SessionController(self.state, TextualBridge(self), self.log_file)
        self.controller.start()

    def on_resize(self) -> None:
        self._save_viewport()

    def _save_viewport(self) -> None:
        self.state.set_viewport(self.size.width, self.size.height)

    # --- Mensajes del hilo de medición ---

    def on_graph_updated(self, message: GraphUpdated) -> None:
        graph = self.query_one("#graph", Static)
        graph.update(Text(message.text, no_wrap=True, overflow="crop"))

    def on_title_updated(self, message: TitleUpdated) -> None:
        self.query_one("#panel", Container).border_title = message.title

    # --- Acciones ---

    def action_quit_app(self) -> None:
        self.state.request_quit()
        self.state.kill_process()
        self.exit()

    def action_restart(self) -> None:
        self.state.request_reload()

    def action_enter_server(self) -> None:
        self.push_screen(
            ServerInputDialog(self.state.get_config().target),
            self._on_server_entered,
        )

    def _on_server_entered(self, target: Optional[str]) -> None:
        if not target:
            return
        current = self.state.get_config()
        self.state.request_reload(MeasurementConfig(
            target=target,
            ipv6=current.ipv6,
            udp=current.udp,
            reverse=current.reverse,
            port=current.port,
        ))

    def action_pick_server(self) -> None:
        self.notify("Descargando lista de servidores...")
        self._load_servers()

    @work(thread=True, exclusive=True)
    def _load_servers(self) -> None:
        try:
            entries = load_server_list(self.servers_url) if self.servers_url else load_server_list()
        except ServerListError as e:
            self.call_from_thread(self.notify, str(e), severity="error")
            return
        self.call_from_thread(
            self.push_screen, ServerListDialog(entries), self._on_server_picked
        )

    def _on_server_picked(self, entry: Optional[ServerEntry]) -> None:
        if entry is None:
            return
        self.state.request_reload(server_to_config(entry, self.state.get_config()))
