"""Multipart upload handling for API adapters.

Exposes `upload_reader`, which buffers uploaded images and enforces upload
limits before the dispatcher runs.
"""
