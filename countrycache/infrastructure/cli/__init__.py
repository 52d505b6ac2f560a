"""Console adapters for the countrycache command line."""
