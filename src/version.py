"""Service version that is read by project build tools and exposed by the API."""

__version__ = "0.3.0"
