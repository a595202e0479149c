"""Utility helpers for sniffing, IDs, text, and I/O.

Modules here provide content-type sniffing, random tokens, slugs, and
filesystem helpers (directory provisioning, path containment, chunked
copies).
"""
