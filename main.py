#!/usr/bin/env python3
"""
Main entry point for Tube Relay.

This script starts the relay server: the metadata endpoint, the range-aware
stream proxy and the browser client shell.
"""

import sys
import os

# Add the current directory to Python path to import our modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tube_relay.main import main

if __name__ == "__main__":
    sys.exit(main())
