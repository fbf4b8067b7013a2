"""Shared logging and event helpers."""
