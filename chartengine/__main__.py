"""Entry point for `python -m chartengine`."""

import sys

from chartengine.cli import main

sys.exit(main())
