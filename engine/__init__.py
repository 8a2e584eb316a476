"""Image and JSON export of generated maps."""
