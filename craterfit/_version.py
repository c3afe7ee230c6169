__version__ = version = "2025.10.0"
