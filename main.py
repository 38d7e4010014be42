#!/usr/bin/env python3
"""
Development entry point for Docucast.
For installed environments, use: docucast
"""
import sys
from pathlib import Path

# Add src directory to path for development mode
current_dir = Path(__file__).parent
src_dir = current_dir / "src"
sys.path.insert(0, str(src_dir))

from docucast.cli import main

if __name__ == "__main__":
    main()
