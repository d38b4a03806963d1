"""Tool shed: a small curated catalogue of links with an admin API."""

__version__ = "1.0.0"
