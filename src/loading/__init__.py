"""Document and dependency metadata loading.

This module reads documentation exports and detects their format revision.
It also resolves which package record a document belongs to.
"""
