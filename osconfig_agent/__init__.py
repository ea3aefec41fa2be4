"""Host configuration agent policies for Google OSConfig."""

__version__ = "0.1.0"
