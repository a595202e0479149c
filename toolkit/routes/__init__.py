"""Route blueprints for the demo API.

Each module is a thin HTTP handler over ``Tools``: upload (multipart
ingestion), files (attachment downloads) and slug (strict JSON in, JSON
out). ``errors`` maps toolkit exceptions to status codes.
"""
