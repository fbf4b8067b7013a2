"""Module entrypoint for `python -m opsdesk_table`."""

from opsdesk_table.cli.app import main


if __name__ == "__main__":  # pragma: no cover - exercised via CLI tests
    main()
