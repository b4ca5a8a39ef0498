#!/usr/bin/env python3
"""
arbwatch: DEX Round-Trip Opportunity Watcher

Main entry point for running the watcher.

Usage:
    # Run continuously (Ctrl+C to stop)
    python main.py

    # Single cycle
    python main.py --once

    # Last 20 recorded opportunities
    python main.py --history 20
"""

from arbwatch.cli import main

if __name__ == "__main__":
    main()
