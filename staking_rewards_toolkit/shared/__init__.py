"""Shared infrastructure: errors, logging, results, retry and config."""
