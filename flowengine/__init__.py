"""Workflow engine core: schema types, number formatting, type inference, configuration and steps."""

__version__ = "0.1.0"