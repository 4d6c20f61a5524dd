"""lattice-cli: Command line interface for lattice.

Provides the ``lattice`` command (validate, compile, graph, schema).
"""

from __future__ import annotations

__version__ = "0.1.0"
