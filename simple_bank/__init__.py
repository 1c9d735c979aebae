"""Simple Bank: atomic money transfers between accounts."""
