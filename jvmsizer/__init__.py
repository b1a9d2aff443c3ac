"""Capacity, memory-safety and JVM tuning analysis for file transfer servers."""

__version__ = "0.1.0"