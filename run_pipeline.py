#!/usr/bin/env python3
"""
Run the event extraction pipeline from a source checkout.

Usage:
    python run_pipeline.py --pdf PATH [--store PATH] [--debug-out PATH]
    python run_pipeline.py --export DIR
"""

import sys
sys.path.insert(0, 'src')

from eventscan.run_pipeline import main

if __name__ == "__main__":
    sys.exit(main())
