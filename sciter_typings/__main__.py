"""
Main entry point for the sciter-typings CLI.
"""

from sciter_typings.cli import cli


def main() -> None:
    """Main function for the sciter-typings CLI."""
    cli()


if __name__ == "__main__":
    main()
