"""Query compilation and lazy evaluation.

This module checks query text against an adapter schema and evaluates it
row by row through a resolver adapter.
"""
