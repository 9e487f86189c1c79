"""Tally command-line interface."""
