"""Entry point for ``python -m hextext``."""

from __future__ import annotations


def main() -> None:
    from hextext.cli.main import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
