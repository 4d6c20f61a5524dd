"""Graph emitters for lattice.

- Emitter: Base class for target backends
- SerializedArtifact: Emitter output
- get_emitter: Look up an emitter by target name
- JsonGraphEmitter: Canonical JSON target
"""

from __future__ import annotations

from lattice_core.emitters.base import (
    EMITTERS,
    Emitter,
    SerializedArtifact,
    available_targets,
    get_emitter,
    node_environment,
)
from lattice_core.emitters.json_emitter import JsonGraphEmitter

__all__: list[str] = [
    "Emitter",
    "SerializedArtifact",
    "EMITTERS",
    "get_emitter",
    "available_targets",
    "node_environment",
    "JsonGraphEmitter",
]
