import sys

from promptcanvas.api.cli import main

if __name__ == "__main__":
    sys.exit(main())
