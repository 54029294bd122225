"""Boundary parsing: plain-data payloads and WKT geometry into domain models."""
