"""
Combine multiple point datasets into a single dataset.

Public API:
    combine(datasets, repository, sink) -> PointDataset | None
        Concatenates payloads in input order and links every input to the
        combined dataset in both directions.
    can_combine(datasets) -> bool
        Whether a selection of datasets is eligible for combination.

Internal modules (not exported):
    _planner: Compatibility checks and start offsets (CombinePlan)
    _link_builder: Payload concatenation, SelectionMaps, deletion hooks
    _orchestrator: Runs planner then builder, publishes the result

Architecture:
    combine() runs a 3-phase process:
    1. Planning: Reject too few inputs or mismatched dimensions (_planner.py)
    2. Construction: Concatenate payloads, register linked data (_link_builder.py)
    3. Publication: Set properties and payload, notify the sink (_orchestrator.py)
"""

from combinedata.combine._orchestrator import combine
from combinedata.combine._planner import can_combine

__all__ = ["can_combine", "combine"]
