"""Client-side data-access layer for Person records over a variable backend schema."""

__version__ = "0.1.0"
