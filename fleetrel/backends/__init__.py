"""Adapters for the external collaborators (balena, GitHub, versionbot)."""
