"""
Entry point for running the crosskit CLI as a module.

Usage: python -m crosskit [command] [options]
"""

from crosskit.cli.parser import main

if __name__ == "__main__":
    main()
