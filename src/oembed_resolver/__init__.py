"""oEmbed resolution and rendering."""

__version__ = "0.1.0"
