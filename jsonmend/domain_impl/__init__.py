"""Domain pillars for the JSON core."""
