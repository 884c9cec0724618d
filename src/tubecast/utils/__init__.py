"""Shared utilities for Tubecast."""
