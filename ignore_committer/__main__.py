"""
Entry point for running ignore_committer as a module.

Allows running as: python -m ignore_committer
"""

from ignore_committer.cli import cli_main

if __name__ == "__main__":
    cli_main()
