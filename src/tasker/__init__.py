"""Personal task list with a rule-based natural-language command layer."""

__version__ = "0.1.0"
