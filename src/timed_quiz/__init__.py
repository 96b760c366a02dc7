"""Timed multiple-choice quiz sessions for the terminal."""
