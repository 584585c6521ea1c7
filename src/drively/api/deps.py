"""Request dependencies shared by the route modules."""
from fastapi import HTTPException, Request

from drively.errors import FreezeCapReachedError, StateError
from drively.state.coordinator import StateCoordinator


def get_coordinator(request: Request) -> StateCoordinator:
    """FastAPI dependency returning the coordinator set up in the lifespan."""
    return request.app.state.coordinator


def state_error_to_http(exc: StateError) -> HTTPException:
    status = 409 if isinstance(exc, FreezeCapReachedError) else 400
    return HTTPException(status_code=status, detail=str(exc))
