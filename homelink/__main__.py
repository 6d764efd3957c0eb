"""Entry point for running homelink as a module: python -m homelink."""

from homelink.cli.commands import app

if __name__ == "__main__":
    app()
