"""Parking-aware multi-stop trip planner."""
