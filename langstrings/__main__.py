"""
Entry point for running langstrings as a module.

Usage:
    python -m langstrings --help
    python -m langstrings keys en.json --flatten
    python -m langstrings convert locales/ --export -t fr
"""
from .cli import app


if __name__ == "__main__":
    app()
