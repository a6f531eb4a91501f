"""Hotspots map - hex selection, navigation and viewport for the coverage map."""
