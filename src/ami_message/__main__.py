"""Allow running the CLI with ``python -m ami_message``."""

import sys

from ami_message.cli import main

sys.exit(main())
