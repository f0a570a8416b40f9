"""
Rich console output for the todoflow CLI.
"""

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from todoflow.core.domain.models import ChatMessage
from todoflow.core.domain.todos import Todo

_STYLES = {
    "info": "cyan",
    "success": "green",
    "system": "bold blue",
    "warning": "yellow",
}


class TodoflowConsole:
    """Console wrapper with chat-style panels and todo tables."""

    def __init__(self, debug: bool = False, console: Console | None = None):
        self.debug = debug
        self.console = console or Console()

    def print_banner(self) -> None:
        self.console.print(
            Panel.fit("[bold blue]todoflow[/bold blue] - chat with your todo list", border_style="blue")
        )

    def print_divider(self) -> None:
        self.console.print(Rule(style="dim"))

    def print_system_message(self, message: str, kind: str = "info") -> None:
        self.console.print(f"[{_STYLES.get(kind, 'white')}]{message}[/]")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def print_error(self, message: str) -> None:
        self.console.print(f"[bold red]✗ {message}[/bold red]")

    def print_debug(self, message: str) -> None:
        if self.debug:
            self.console.print(f"[dim]{message}[/dim]")

    def print_agent_message(self, message: ChatMessage) -> None:
        metadata = message.metadata
        border = "red" if metadata.error else "green"
        self.console.print(
            Panel(message.content, title="Agent", title_align="left", border_style=border)
        )
        if metadata.error:
            self.print_warning(metadata.error)
        if metadata.matched_content:
            self.print_system_message(f"Matched task: {metadata.matched_content}", "info")
        for call in metadata.tool_calls or []:
            self.print_debug(f"Tool call: {call.name} {call.arguments}")
        if metadata.todo_ids:
            self.print_debug(f"Todo ids: {', '.join(metadata.todo_ids)}")

    def print_todos(self, todos: list[Todo], title: str = "Todos") -> None:
        if not todos:
            self.print_system_message("No todos found.", "info")
            return
        table = Table(title=title)
        table.add_column("Done", justify="center")
        table.add_column("Content", style="white")
        table.add_column("Priority", justify="right", style="magenta")
        table.add_column("Labels", style="cyan")
        table.add_column("Agent", style="dim")
        table.add_column("Id", style="dim")
        for todo in todos:
            table.add_row(
                "✓" if todo.completed else "",
                todo.content,
                str(todo.priority) if todo.priority else "",
                ", ".join(todo.labels),
                todo.agent_type,
                todo.id,
            )
        self.console.print(table)

    def print_summary(self, summary: dict[str, Any], title: str = "Interactions") -> None:
        table = Table(title=title, show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")
        for key, value in summary.items():
            table.add_row(key.replace("_", " ").title(), str(value))
        self.console.print(table)

    def prompt(self) -> str:
        return self.console.input("[bold cyan]You>[/bold cyan] ")
