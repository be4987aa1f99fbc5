"""Text layout helpers: grapheme cluster breaks, pattern hyphenation, glyph rasters and run utilities."""

__version__ = "0.1.0"

__all__ = ["grapheme", "hyphenator", "raster", "text_runs"]