"""gitorg: manage and monitor multiple GitHub organizations."""

__version__ = "0.1.0"
