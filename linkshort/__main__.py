"""Run the link shortener with ``python -m linkshort``."""

from .main import main

if __name__ == "__main__":
    main()
