#!/usr/bin/env python3
"""Convenience runner for the sonar coverage replay tool.

Usage:
    python run.py <message-log.csv> [--geojson coverage.geojson] [--map coverage.html]
"""
import logging
import sys

from sonar_coverage.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    sys.exit(main())
