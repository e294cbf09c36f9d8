"""Allow ``python -m argon2digest``."""

import sys

from argon2digest.cli import main

sys.exit(main())
