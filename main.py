# main.py - run the abbreviation completer from a checkout
#   python main.py serve
#   python main.py lookup Gl

import sys

from abbrev_completer.cli import main

if __name__ == "__main__":
    sys.exit(main())
