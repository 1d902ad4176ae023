"""SOC 2 readiness roadmap engine."""

__version__ = "1.0.0"
