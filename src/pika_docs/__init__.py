"""Autosave, version history and restore for classroom documents."""
