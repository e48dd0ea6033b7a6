"""Kernel module ABI whitelist extraction."""

__version__ = "1.0.0"
