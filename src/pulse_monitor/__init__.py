"""pulse_monitor - periodic CPU, memory and disk sampler with rolling averages."""

__version__ = "0.1.0"
