"""oEmbed provider matching, autodiscovery and resource descriptors."""
