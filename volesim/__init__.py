"""Simulator for the Vole teaching machine: memory, CPU and an interactive menu."""

__version__ = "0.1.0"
__all__ = ["memory", "cpu", "machine"]