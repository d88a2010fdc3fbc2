"""Allow `python -m zrlang`."""

from .cli import main

if __name__ == "__main__":
    main()
