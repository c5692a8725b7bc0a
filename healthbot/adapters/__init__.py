"""Adapters between the health bot core and the outside world."""
