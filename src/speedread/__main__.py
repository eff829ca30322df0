"""Main entry point for the speedread package."""

from speedread.cli import app


def main():
    """Run the speedread command-line interface."""
    app()


if __name__ == "__main__":
    main()
