"""
merger.py
---------
Folds one executed phase into the lifecycle record's phases. Returns a new
Phases value; slots belonging to other phases are carried over untouched.
"""
from typing import Optional

from .models import Phase, PhaseConfig, PhaseRecord, Phases, ResponseOutcome


def merge_phase(
    phases: Phases,
    phase: Phase,
    config: Optional[PhaseConfig],
    outcome: Optional[ResponseOutcome] = None,
) -> Phases:
    """
    config: the declared fields for `phase`, or None when the phase block is absent
    outcome: the executed response, or None when the phase had no method configured
    """
    phase = Phase(phase)
    if phase is Phase.QUERY:
        raise ValueError("Query results are not merged into a lifecycle record")

    merged = phases.model_copy(deep=True)
    if config is None:
        # Phase block absent from the configuration
        setattr(merged, phase.value, None)
        return merged

    if phase is Phase.DELETE:
        merged.delete = PhaseConfig(**config.declared())
        return merged

    record = PhaseRecord(
        **config.declared(),
        body=outcome.text if outcome is not None else "",
        headers=dict(outcome.headers) if outcome is not None else {},
    )
    setattr(merged, phase.value, record)
    return merged
