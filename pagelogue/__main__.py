"""Main entry point for the pagelogue CLI."""

from pagelogue.cli import main

if __name__ == "__main__":
    main()
