"""mdBook preprocessor that renders ``{{#infobox}}`` blocks as HTML tables."""

__version__ = "0.1.0"
