"""ldgraph — linked-data graph filtering and subgraph extraction.

Invariants:
    - Package root holds only the version (import side-effects prohibited)

Design Decisions:
    - No star exports: import from ldgraph.core.* / ldgraph.services.* explicitly
"""

__version__ = "0.1.0"
