"""Allow ``python -m svg2pts``."""

import sys

from svg2pts.cli import main

sys.exit(main())
