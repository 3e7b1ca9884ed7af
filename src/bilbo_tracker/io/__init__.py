"""Persistence of tracked exercises."""
