"""Entry point for ``python -m gboxrun``."""

from gboxrun.cli.main import main

if __name__ == "__main__":
    main()
