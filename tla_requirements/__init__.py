"""TLA+ Requirements Analyzer — requirement extraction, classification and temporal rewrites."""

__version__ = "1.4.0"
