"""Helpers shared by the conversation modules."""
