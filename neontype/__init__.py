"""Timed typing practice with a server-validated ranking."""
