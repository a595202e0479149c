"""Service layer housing the toolkit's request handling logic.

Contains the upload pipeline, strict JSON decoding and JSON responses,
attachment downloads, and the outbound JSON push. ``Tools`` wires them
together; routes only talk to ``Tools``.
"""
