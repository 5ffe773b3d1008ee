"""Trip Tally: trips, expenses and spending summaries over a small REST API."""

__version__ = "0.1.0"
