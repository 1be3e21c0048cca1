"""Release decision core.

- model: events, correlation tags, release records, build options
- classifier: event -> action (pure)
- correlator: find the release built for a pull request
- tagging: idempotent tag creation
- orchestrator: sequences the collaborator calls for one event
- ports: collaborator protocols
"""

from __future__ import annotations
