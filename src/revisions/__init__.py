"""Per-revision document implementations.

Each supported format revision provides parse, storage, index, adapter,
and schema operations behind one plugin interface.
"""
