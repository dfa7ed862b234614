#!/usr/bin/env python3
"""
simvar - synthetic single-sample VCF generator

Main entry point for the simvar tool.
"""

import sys
from simvar.cli import main

if __name__ == '__main__':
    sys.exit(main())
