"""Allow ``python -m pickline``."""

import sys

from pickline.cli.serve import main

sys.exit(main())
