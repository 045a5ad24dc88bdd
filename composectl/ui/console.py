"""Console UI for composectl."""
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class ConsoleUI:
    """UI class for console output."""
    def __init__(self, console: Console = None):
        self.console = console or Console()

    def print_error(self, error, show_traceback=False):
        """Print error message."""
        self.console.print(f"[red]Error:[/red] {escape(str(error))}")
        if show_traceback:
            self.console.print_exception()

    @contextmanager
    def show_progress(self, title):
        """Show a spinner while a long step runs."""
        with self.console.status(f"[cyan]{title}[/cyan]", spinner="dots") as status:
            yield status

    def display_ports(self, result):
        """Display published ports per service and the web URL."""
        table = Table(title="Published Ports")
        table.add_column("Service", style="cyan")
        table.add_column("Host Port", style="green")
        table.add_column("Container Port", style="yellow")

        for service, bindings in result.ports.items():
            if not bindings:
                table.add_row(service, "-", "-")
                continue
            for index, binding in enumerate(bindings):
                table.add_row(
                    service if index == 0 else "",
                    binding.host_port,
                    binding.container_port
                )

        self.console.print(table)
        if result.web_url:
            self.console.print(f"\n[green]Application available at:[/green] {result.web_url}")
        else:
            self.console.print("\n[yellow]No service exposes a host port[/yellow]")
