"""Allow running as python -m randkit"""

import sys

from .cli import main

sys.exit(main())
