import sys

from docsync.main import main

if __name__ == "__main__":
    sys.exit(main())
