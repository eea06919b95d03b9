"""What-if scenario endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from devpulse.api.deps import get_store
from devpulse.metrics import compute_health_score
from devpulse.simulation import project
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/simulation", tags=["simulation"])


@router.get("")
def simulation_dashboard(store: SnapshotStore = Depends(get_store)):
    state = store.state
    return {
        "scenarios": [s.to_dict() for s in state.derived.simulation_scenarios],
        "currentHealth": compute_health_score(state.snapshot).overall,
    }


@router.get("/scenarios")
def scenarios(store: SnapshotStore = Depends(get_store)):
    return [s.to_dict() for s in store.derived.simulation_scenarios]


@router.get("/run/{scenario_id}")
def run_scenario(scenario_id: str, store: SnapshotStore = Depends(get_store)):
    state = store.state
    scenario = state.derived.scenario(scenario_id)
    if scenario is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    names = {m.id: m.name for m in state.snapshot.members}
    return project(scenario, compute_health_score(state.snapshot), names).to_dict()
