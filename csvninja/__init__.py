"""CSV Ninja: split uploaded CSV files into smaller, row-bounded parts."""

__version__ = "1.0.0"
