"""Roof measurement stages.

- pitch: pitch parsing and surface-area multipliers
- facets: per-facet area and perimeter
- linear: edge-segment aggregation by category
- assemble: merge facets and segments into a MeasurementSet
"""
