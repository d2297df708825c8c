"""Allow ``python -m mamd``."""

import sys

from mamd.cli import main

sys.exit(main())
