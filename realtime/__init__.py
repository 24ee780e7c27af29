"""Realtime reports: continuously maintained aggregations read back as bucketed series."""
