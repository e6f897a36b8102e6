"""Adapters for the external services MindWords talks to."""
