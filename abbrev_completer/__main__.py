import sys

from abbrev_completer.cli import main

sys.exit(main())
