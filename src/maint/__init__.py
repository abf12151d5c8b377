"""maint - configurable AI maintenance agents."""

__version__ = "0.1.0"
