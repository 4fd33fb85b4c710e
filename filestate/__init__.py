"""filestate — audit and remediate declared file state.

Reads one request describing the desired mode, ownership and content of a set
of paths, reports every deviation, and (unless running check-only) applies
the corrective operations.
"""

__version__ = "0.3.0"
