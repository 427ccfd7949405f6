"""Allow ``python -m zorx``."""

from zorx.cli import main

if __name__ == "__main__":
    main()
