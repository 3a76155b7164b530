"""Playback, search and device services."""
