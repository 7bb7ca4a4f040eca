#!/usr/bin/env python3
"""
GlyphForge - A Python Path Tracer for the Terminal

Main entry point for rendering scenes.
"""

import sys

from glyphforge.cli import main


if __name__ == '__main__':
    sys.exit(main())
