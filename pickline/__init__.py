"""pickline: stdio dispatch backend for an editor fuzzy picker."""

__version__ = "0.1.0"
