"""Core utilities and shared infrastructure.

- config: Validation thresholds loaded from defaults or the environment
- constants: Named constants (Earth radius, check ids, error codes)
- exceptions: Custom exception hierarchy
"""
