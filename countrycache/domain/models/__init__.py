"""Domain value objects shared by the core and infrastructure layers."""
