import sys

from zigdocs.cli import main

if __name__ == "__main__":
    sys.exit(main())
