"""Logging and configuration for treecopy."""
