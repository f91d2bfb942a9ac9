"""Revision-dispatched storage, index, and adapter pipeline.

This module binds a loaded document to its revision's implementation and
exposes one query interface regardless of the revision in play.
"""
