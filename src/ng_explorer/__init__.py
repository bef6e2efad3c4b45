"""
NG Explorer - Angular component reachability and service usage analysis.
"""

__version__ = "0.1.0"

from .cli import cli


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = ["cli", "main"]
