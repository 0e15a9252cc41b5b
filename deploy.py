#!/usr/bin/env python3
"""Entry point for deploying GalaxyData."""

import sys
from galaxydata.cli import main

if __name__ == "__main__":
    sys.exit(main())
