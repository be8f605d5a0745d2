"""Utility helpers for nestspec."""
