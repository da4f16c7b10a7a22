"""
Entry point for running the package as a module.

Usage:
    python -m vroid2bvh input.vroidpose out.bvh
"""

from .main import main

if __name__ == '__main__':
    main()
