"""noteref - in-memory tag and wiki-link index for a plain-text note collection.

Scans markdown notes for inline `#tags` and `[[wiki links]]`, caches the
parsed candidates per file, and answers "where is this tag / note
referenced?" and "which tags exist?" across the whole workspace.

Package entry point. Exports the version string only; the CLI lives in
main.py and the library API in index.py.
"""

__version__ = "0.1.0"
