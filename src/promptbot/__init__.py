"""promptbot - profile-collecting prompt bot."""

__version__ = "1.0.0"
