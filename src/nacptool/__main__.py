"""Allow running as python -m nacptool."""

from nacptool.cli import app


def main() -> None:
    app()


main()
