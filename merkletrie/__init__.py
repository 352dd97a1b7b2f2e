"""Merkletrie command-line interface."""
