"""
Entry point for running srv_optimize as a module.

Usage:
    sudo python -m srv_optimize
"""

from .cli import main

if __name__ == "__main__":
    main()
