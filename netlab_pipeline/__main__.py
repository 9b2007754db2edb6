"""Allow ``python -m netlab_pipeline``."""

import sys

from .cli import main

sys.exit(main())
