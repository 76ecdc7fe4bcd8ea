"""Entry point for ``python -m hdltest``."""

from hdltest.cli.main import cli

if __name__ == "__main__":
    cli()
