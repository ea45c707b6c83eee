"""Operational scripts for the ecrproj stack."""
