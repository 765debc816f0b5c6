"""Ask PostgreSQL questions in plain language and get guarded SELECT results."""

__version__ = "0.1.0"
