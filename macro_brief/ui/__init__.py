"""Presentation: formatting, CSV export, email digest and dashboard."""
