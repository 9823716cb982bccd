"""Allow ``python -m smartedge``."""
import sys

from .presentation.cli import main

sys.exit(main())
