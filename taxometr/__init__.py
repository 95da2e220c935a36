"""Route and geocode resolution for the trip-fare application."""

__version__ = "0.1.0"
