"""State persistence and backup import/export."""
