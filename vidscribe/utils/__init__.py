"""Utility helpers for VidScribe (logging, workspace, progress, batch execution)."""
