"""CLI module for homelink."""
