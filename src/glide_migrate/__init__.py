"""glide-migrate: Pattern detection and conversion for Redis-client to GLIDE migrations."""

__version__ = "0.1.0"
