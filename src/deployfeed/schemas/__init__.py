"""Packaged JSON schemas for deployfeed run outputs."""
