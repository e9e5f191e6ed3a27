"""Macro Brief: economic indicator and FX analytics with rule-based insights."""

__version__ = "0.1.0"
