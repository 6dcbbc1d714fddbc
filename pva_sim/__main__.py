"""Allow ``python -m pva_sim``."""

import sys

from pva_sim.cli import main

sys.exit(main())
