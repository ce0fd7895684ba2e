"""Prometheus exporter for Brother printer maintenance information."""

__version__ = "0.1.0"
