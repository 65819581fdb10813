import logging
from typing import Any, Optional

from botocore.exceptions import ClientError, NoCredentialsError
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from ec2_query.dependencies import get_transport
from ec2_query.models.instance_models import ParameterPreview, QueryResponse
from ec2_query.services import instance_service
from ec2_query.services.validation import InvalidArgumentError

# Create a router instance. Every EC2 instance operation is served from it.
router = APIRouter()


def _lookup(operation: str):
    handler = instance_service.OPERATIONS.get(operation)
    if handler is None:
        raise HTTPException(status_code=404, detail=f"Unknown operation '{operation}'")
    return handler


def _invoke(handler, transport, options: dict[str, Any]):
    try:
        return handler(transport, **options)

    # --- Error Handling ---
    except InvalidArgumentError as e:
        logging.warning(f"Rejected {handler.__name__}: {e.message}")
        raise HTTPException(status_code=400, detail={"field": e.field, "message": e.message})
    except NotImplementedError as e:
        raise HTTPException(status_code=501, detail=str(e))
    except NoCredentialsError:
        logging.exception("Error: AWS credentials not found or are invalid.")
        raise HTTPException(status_code=400, detail="AWS credentials error")
    except ClientError as e:
        if e.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 400) >= 500:
            logging.exception("EC2 reported a server error:")
            raise HTTPException(status_code=502, detail="AWS service error")
        logging.exception("A client error occurred:")
        raise HTTPException(status_code=400, detail="AWS client error")
    except Exception:
        logging.exception("An unexpected error occurred:")
        raise HTTPException(status_code=500, detail="Unexpected error")


# Flatten the options for an operation and return them without sending anything.
@router.post("/{operation}/parameters", response_model=ParameterPreview)
async def api_preview_parameters(
    operation: str,
    options: Optional[dict[str, Any]] = Body(default=None)
):
    handler = _lookup(operation)
    # The capturing transport hands back what would have been sent.
    def preview(action, params):
        return ParameterPreview(action=action, parameters=params)

    return await run_in_threadpool(_invoke, handler, preview, options or {})


# Validate, flatten and send an operation to EC2.
@router.post("/{operation}", response_model=QueryResponse)
async def api_call_operation(
    operation: str,
    options: Optional[dict[str, Any]] = Body(default=None),  # The JSON body is the options bundle.
    transport = Depends(get_transport)
):
    handler = _lookup(operation)
    return await run_in_threadpool(_invoke, handler, transport, options or {})
