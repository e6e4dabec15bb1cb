"""Allow running as ``python -m cursor_exporter``."""

from cursor_exporter import cli

if __name__ == "__main__":
    cli.app()
