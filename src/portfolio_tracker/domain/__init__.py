"""Domain layer: declared holdings, quotes and valued outputs."""
