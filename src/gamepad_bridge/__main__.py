"""Entry point for ``python -m gamepad_bridge``."""

from .cli import main

if __name__ == "__main__":
    main()
