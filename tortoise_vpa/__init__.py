"""Lifecycle management of the VPAs created by Tortoise."""

__version__ = "0.1.0"
