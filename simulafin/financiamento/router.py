"""
FastAPI Router for financing simulation endpoints.
"""
from typing import List
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from simulafin.auth.dependencies import get_current_actor
from simulafin.auth.schemas import Actor
from simulafin.core.database import get_db
from simulafin.core.exceptions import PersistenceError
from simulafin.core.logger import get_logger_with_correlation
from simulafin.financiamento.engine import compute_sac
from simulafin.financiamento.schemas import SimulationRequest, SimulationResponse, SimulationRecordResponse
from simulafin.financiamento.service import save_simulation, list_user_simulations, get_simulation, delete_simulation

router = APIRouter(tags=["Financing"])


@router.post("/simular", response_model=SimulationResponse, status_code=201)
def simulate_financing(
    data: SimulationRequest,
    include_table: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    x_correlation_id: str = Header(default=None)
) -> SimulationResponse:
    """
    **SAC property financing simulation**

    - **property_value**: Property value (R$), number or display string
    - **down_payment_percentage**: Down payment (%), minimum 20
    - **term_years**: Term in years (1-35)

    The simulation is stored in the user's history. If storing fails the
    computed result is still returned with `saved=false`.
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    logger.info(f"Starting simulation: {data.model_dump()}")
    result = compute_sac(data.property_value, data.down_payment_percentage, data.term_years)

    try:
        simulation = save_simulation(db, actor, result, correlation_id)
    except PersistenceError as e:
        logger.warning(f"Simulation computed but not saved: {e.message}")
        return SimulationResponse.from_result(result, include_table=include_table)

    logger.info(f"Simulation completed successfully: id={simulation.id}")
    return SimulationResponse.from_result(
        result,
        simulation_id=simulation.id,
        created_at=simulation.created_at,
        include_table=include_table
    )


@router.get("/simulacoes", response_model=List[SimulationRecordResponse])
def my_simulations(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    return list_user_simulations(db, actor.user_id)


@router.get("/simulacoes/{simulation_id}", response_model=SimulationRecordResponse)
def simulation_detail(
    simulation_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    simulation = get_simulation(db, simulation_id, actor.user_id)
    if not simulation:
        raise HTTPException(status_code=404, detail="Simulation not found")
    return simulation


@router.delete("/simulacoes/{simulation_id}", status_code=204)
def remove_simulation(
    simulation_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    simulation = delete_simulation(db, simulation_id, actor.user_id)
    if not simulation:
        raise HTTPException(status_code=404, detail="Simulation not found")
    return
