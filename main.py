#!/usr/bin/env python3
"""
Main entry point for the polygon view factor tool.

This script provides the command-line interface for calculating
view factors between planar polygons.
"""

from polyvf.cli import main  # single source of truth

if __name__ == "__main__":
    main()
