"""Roof measurement and validation core.

Converts GPS-traced roof geometry (facet polygons and linear edge
segments) into pitch-corrected areas, perimeters and categorised
linear-feature lengths, and audits the resulting measurement set with a
deterministic multi-stage validation pipeline before customer delivery.
"""

__version__ = "0.1.0"
