"""Event registration API: tournament and volunteer sign-up, sponsors, content and settings."""

__version__ = "0.1.0"
