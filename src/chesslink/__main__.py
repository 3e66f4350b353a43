"""Allow ``python -m chesslink``."""

import sys

from chesslink.app import main

sys.exit(main())
