"""Shared domain building blocks."""
