"""
Persistence of financing simulations.
Simulations are append-only history; the owner is the only one allowed to delete them.
"""
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from simulafin.auth.schemas import Actor
from simulafin.core.exceptions import NotAuthenticatedError, PersistenceError
from simulafin.core.logger import logger, audit_log
from simulafin.financiamento.engine import SacResult
from simulafin.financiamento.models import Simulation


def save_simulation(
    db: Session,
    actor: Optional[Actor],
    result: SacResult,
    correlation_id: str
) -> Simulation:
    """
    Stores a computed simulation in the owner's history.
    Raises PersistenceError when the write is rejected; the caller decides how to surface it.
    """
    if actor is None:
        raise NotAuthenticatedError()

    simulation = Simulation(
        user_id=actor.user_id,
        user_email=actor.email,
        property_value=result.property_value,
        down_payment=result.down_payment,
        down_payment_percentage=result.down_payment_percentage,
        financed_amount=result.financed_amount,
        monthly_payment=result.first_monthly_payment,
        total_amount=result.total_amount,
        total_interest=result.total_interest,
        term_years=result.term_years,
        correlation_id=correlation_id
    )

    try:
        db.add(simulation)
        db.commit()
        db.refresh(simulation)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving simulation for user {actor.user_id}: {str(e)}")
        raise PersistenceError("Error saving simulation") from e

    audit_log(
        action="simulation_created",
        user=actor.user_id,
        resource=f"simulation_id={simulation.id}",
        details={
            "correlation_id": correlation_id,
            "property_value": result.property_value,
            "term_years": result.term_years
        }
    )
    logger.info(f"Simulation persisted: id={simulation.id}")
    return simulation


def list_user_simulations(db: Session, user_id: str) -> List[Simulation]:
    """Returns the user's simulations, newest first."""
    try:
        return db.query(Simulation).filter(
            Simulation.user_id == user_id
        ).order_by(Simulation.created_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error loading simulations for user {user_id}: {str(e)}")
        raise PersistenceError("Error loading your simulations") from e


def get_simulation(db: Session, simulation_id: str, user_id: str) -> Optional[Simulation]:
    try:
        return db.query(Simulation).filter(
            Simulation.id == simulation_id,
            Simulation.user_id == user_id
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Error loading simulation {simulation_id}: {str(e)}")
        raise PersistenceError("Error loading simulation") from e


def delete_simulation(db: Session, simulation_id: str, user_id: str) -> Optional[Simulation]:
    """Deletes an owned simulation. Returns None when it does not exist for this user."""
    simulation = get_simulation(db, simulation_id, user_id)
    if not simulation:
        return None

    try:
        db.delete(simulation)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting simulation {simulation_id}: {str(e)}")
        raise PersistenceError("Error deleting simulation") from e

    audit_log(
        action="simulation_deleted",
        user=user_id,
        resource=f"simulation_id={simulation_id}"
    )
    return simulation
