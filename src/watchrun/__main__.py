"""Module entry point for ``python -m watchrun``."""

from watchrun.cli import main

if __name__ == "__main__":
    main()
