"""Allow running the CLI with ``python -m json2text.cli``."""

from json2text.cli.main import main

if __name__ == "__main__":
    main()
