#!/usr/bin/env python3
"""
Entry point for running monopack as a module: python -m monopack
"""

import sys

from monopack.main import main

if __name__ == '__main__':
    sys.exit(main())
