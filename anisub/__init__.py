"""AnimeParadise catalog cross-referenced with the Jimaku subtitle index."""

__version__ = "0.3.0"
