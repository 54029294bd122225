"""Measurement validation.

- checks: the individual rules and their registry
- pipeline: run every rule and aggregate a ValidationResult
- summary: Markdown rendering of a ValidationResult
"""
