"""Seed and mock data generation for the Scout retail analytics dashboard."""

__version__ = "0.1.0"
