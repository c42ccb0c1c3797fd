"""System resource samplers."""
