"""Run the MediBook API server."""

import uvicorn
from rich.console import Console

from medibook import config
from medibook.api import create_app
from medibook.hospital.database import Database
from medibook.logging_config import configure_logging

console = Console()


def main():
    """Start the API on the configured host and port."""
    configure_logging()

    db = Database()
    db.init()

    console.print("[bold blue]MediBook hospital services[/bold blue]")
    console.print(f"Database: [dim]{db.path}[/dim]")
    console.print(f"Listening on [bold green]http://{config.HOST}:{config.PORT}[/bold green]\n")

    uvicorn.run(create_app(db), host=config.HOST, port=config.PORT, log_config=None)


if __name__ == "__main__":
    main()
