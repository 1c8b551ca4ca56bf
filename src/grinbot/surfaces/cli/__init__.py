"""Typer command line surface."""
