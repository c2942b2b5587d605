"""verdict CLI entry point."""

from verdict.cli import app

if __name__ == "__main__":
    app()
