"""Pipelines that orchestrate the core functions."""
