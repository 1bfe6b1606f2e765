#!/usr/bin/env python3
"""
Point Sphere: quick launcher.

Usage:
    python run_pointsphere.py [options]

Run ``python run_pointsphere.py --help`` for full options.
"""

from pointsphere.app import main

if __name__ == "__main__":
    main()
