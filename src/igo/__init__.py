"""IG Obsessed tracker API."""
