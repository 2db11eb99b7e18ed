"""Allow ``python -m inplace_engine``."""

import sys

from .cli import main

sys.exit(main())
