"""Shared travel expense packages.

This namespace exposes helper modules that can be imported by any
application inside the monorepo. Individual packages should keep their
public API small and free of web or persistence concerns.
"""
