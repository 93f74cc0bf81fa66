"""Module entrypoint for ``python -m duskytui``."""

from .cli import main


if __name__ == "__main__":
    main()
