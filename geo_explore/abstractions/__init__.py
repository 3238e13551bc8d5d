"""Shared data types for the exploration pipelines."""
