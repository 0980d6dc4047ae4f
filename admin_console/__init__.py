"""Admin console for the restaurant-review / social-dining platform."""

__version__ = "0.1.0"
