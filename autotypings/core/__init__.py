"""Shared infrastructure: configuration, logging, HTTP and batching."""
