"""Configuration for jsontrace."""
