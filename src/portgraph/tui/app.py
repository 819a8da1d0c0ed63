"""Textual TUI for browsing port dependency closures."""

from __future__ import annotations

from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header, Input, Static, Tree
from textual.widgets.tree import TreeNode
from textual.worker import Worker, WorkerState

from portgraph.api import open_registry
from portgraph.core.closure import ClosureMap, build_closure
from portgraph.core.registry import Registry

# Limits to keep the tree widget responsive on large ports trees
MAX_LISTED_PORTS = 500
MAX_TREE_NODES = 1000

MARK_SEEN = "seen"
MARK_NOT_FOUND = "not found"

COLOR_HEADER = "bold magenta"
COLOR_PKG = "white"
COLOR_STATS = "cyan"


def closure_outline(root: str, closure: ClosureMap) -> list[tuple[int, str, str]]:
    """
    Flatten a closure into (depth, name, marker) rows in depth-first order.

    Each package is expanded at its first appearance only; later appearances
    are marked "seen". Names missing from the closure are marked "not found".
    """
    rows: list[tuple[int, str, str]] = []
    expanded: set[str] = set()
    stack: list[tuple[int, str]] = [(0, root)]
    while stack:
        depth, name = stack.pop()
        if name not in closure:
            rows.append((depth, name, MARK_NOT_FOUND))
            continue
        if name in expanded:
            rows.append((depth, name, MARK_SEEN))
            continue
        expanded.add(name)
        rows.append((depth, name, ""))
        for dep in reversed(closure[name]):
            stack.append((depth + 1, dep))
    return rows


def closure_stats(closure: ClosureMap) -> tuple[int, int, int]:
    """Return (packages, edges, singletons) for a closure."""
    edges = sum(len(deps) for deps in closure.values())
    singletons = sum(1 for deps in closure.values() if not deps)
    return len(closure), edges, singletons


def _row_label(name: str, marker: str) -> str:
    if marker:
        return f"[dim]{name} ({marker})[/]"
    return f"[{COLOR_PKG}]{name}[/]"


class ClosureApp(App[None]):
    """Terminal UI to explore port dependency closures."""

    TITLE = "portgraph"

    BINDINGS = [
        Binding("escape", "back", "Back", show=True),
        Binding("/", "focus_input", "Package"),
        Binding("r", "refresh", "Reload"),
        Binding("e", "expand_all", "Expand all"),
        Binding("c", "collapse_all", "Collapse"),
        Binding("q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    #root_input {
        margin: 0 1;
    }
    #details {
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 5;
    }
    """

    def __init__(
        self,
        root_package: str | None = None,
        ports: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._root_package = root_package
        self._ports = ports
        self._registry: Registry | None = None
        self._loading = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Container(id="main_container"):
            yield Input(placeholder="port name, Enter to show its closure", id="root_input")
            yield Tree("Ports", id="dep_tree")
            yield Static("[dim]Loading ports...[/]", id="details", markup=True)
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = "Dependency Closure Explorer"
        self._start_load()

    def _start_load(self) -> None:
        if self._loading:
            return
        self._loading = True
        self.run_worker(self._load_worker, thread=True)

    def _load_worker(self) -> Registry | None:
        """Load the registry in a background thread."""
        return open_registry(self._ports)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.SUCCESS:
            self._loading = False
            self._registry = event.worker.result
            if self._registry is None:
                self._set_details(
                    "[red]No ports directory found.[/] Use --ports, or set "
                    "PORTGRAPH_PORTS or VCPKG_ROOT."
                )
                return
            if self._root_package:
                self._show_closure(self._root_package)
            else:
                self._show_port_list()
        elif event.state == WorkerState.ERROR:
            self._loading = False
            self._set_details(f"[red]Error: {event.worker.error!s}[/]")

    def _set_details(self, text: str) -> None:
        self.query_one("#details", Static).update(text)

    def _show_port_list(self) -> None:
        tree = self.query_one("#dep_tree", Tree)
        tree.clear()
        if self._registry is None:
            return
        names = self._registry.names()
        tree.root.label = f"[{COLOR_HEADER}]Ports ({len(names)})[/]"
        for name in names[:MAX_LISTED_PORTS]:
            tree.root.add_leaf(f"[{COLOR_PKG}]{name}[/]", data=name)
        if len(names) > MAX_LISTED_PORTS:
            tree.root.add_leaf(f"[dim]… and {len(names) - MAX_LISTED_PORTS} more[/]")
        tree.root.expand()
        self._set_details(
            f"Total: [{COLOR_STATS}]{len(names)}[/] ports\n\n"
            "[dim]↑/↓[/] move  ·  [dim]Enter[/] on a port = show closure  ·  [dim]/[/] = type a name"
        )
        tree.focus()

    def _show_closure(self, root: str) -> None:
        if self._registry is None:
            return
        self._root_package = root
        closure = build_closure([root], self._registry)
        tree = self.query_one("#dep_tree", Tree)
        tree.clear()
        tree.root.label = f"[{COLOR_HEADER}]{root}[/]"

        if root not in closure:
            tree.root.add_leaf(f"[dim]{root} ({MARK_NOT_FOUND})[/]")
            self._set_details(f"[red]Not in ports directory:[/] {root}")
            tree.root.expand()
            return

        parents: list[TreeNode] = [tree.root]
        rows = closure_outline(root, closure)
        # The root row is the tree root itself
        for count, (depth, name, marker) in enumerate(rows[1:]):
            if count >= MAX_TREE_NODES:
                tree.root.add_leaf(f"[dim]… truncated ({MAX_TREE_NODES} nodes max)[/]")
                break
            del parents[depth:]
            parent = parents[-1]
            if marker or not closure.get(name):
                parents.append(parent.add_leaf(_row_label(name, marker), data=name))
            else:
                parents.append(parent.add(_row_label(name, marker), data=name, expand=False))
        tree.root.expand()

        packages, edges, singletons = closure_stats(closure)
        self._set_details(
            f"[{COLOR_HEADER}]{root}[/]\n\n"
            f"Packages: [{COLOR_STATS}]{packages}[/]  ·  Edges: [{COLOR_STATS}]{edges}[/]  ·  "
            f"Without dependencies: [{COLOR_STATS}]{singletons}[/]\n"
            "[dim]Esc[/] = back to port list"
        )
        tree.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        if value:
            self._show_closure(value)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        name = event.node.data
        if isinstance(name, str) and name != self._root_package:
            self._show_closure(name)

    def action_back(self) -> None:
        self._root_package = None
        self._show_port_list()

    def action_focus_input(self) -> None:
        self.query_one("#root_input", Input).focus()

    def action_refresh(self) -> None:
        self._start_load()

    def action_expand_all(self) -> None:
        self.query_one("#dep_tree", Tree).root.expand_all()

    def action_collapse_all(self) -> None:
        tree = self.query_one("#dep_tree", Tree)
        for child in tree.root.children:
            child.collapse_all()
