"""Main entry point when executing countrycache as a package.

This allows running the package using python -m countrycache.
"""

from countrycache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
