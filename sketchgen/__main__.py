# File: sketchgen/__main__.py
"""
Sketchgen — Module entry point.

Allows running the generator directly via::

    python -m sketchgen generate -f resources/blueprints/Post.yaml

This module simply delegates to the CLI entry point defined in ``sketchgen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from sketchgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
