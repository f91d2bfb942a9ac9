"""Build-time generation of revision dispatch sources.

This module renders templates against the list of supported revisions.
It keeps generated dispatch code consistent as revisions are added or dropped.
"""
