"""Main entry point for wnpbridge."""

from wnpbridge.cli.main import cli

if __name__ == "__main__":
    cli()
