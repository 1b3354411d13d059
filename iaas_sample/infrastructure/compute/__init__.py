"""Compute provider adapters."""
