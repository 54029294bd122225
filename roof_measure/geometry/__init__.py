"""Geometric algorithms over geographic rings and segments.

- geodesic: Haversine great-circle distance in feet
- projection: approximate local planar projection (roof scale only)
- polygon: Shoelace area, perimeter, ring closure
- intersection: segment crossing, self-intersection, overlap heuristic
"""
