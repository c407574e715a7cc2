"""Module entrypoint for ``python -m mirrortree``.

All argument parsing and dispatch happen in ``mirrortree.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
