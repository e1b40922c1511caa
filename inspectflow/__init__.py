"""Client-side data contracts and rules for the inspection tracking API."""

__version__ = "0.3.0"
