"""
Transfer API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from simple_bank.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidArgumentError,
    TransferError,
)
from simple_bank.models.base import SessionLocal
from simple_bank.schemas.transfer import TransferRequest, TransferResult
from simple_bank.services.store import Store
from simple_bank.services.transfer_service import TransferService

router = APIRouter(prefix="/transfers", tags=["Transfers"])


def get_transfer_service() -> TransferService:
    return TransferService(Store(SessionLocal))


@router.post("", response_model=TransferResult, status_code=201)
def create_transfer(
    request: TransferRequest,
    service: TransferService = Depends(get_transfer_service),
):
    """Transfer money between two accounts."""
    try:
        return service.transfer(
            request.from_account_id,
            request.to_account_id,
            request.amount,
        )
    except (InvalidArgumentError, InsufficientFundsError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AccountNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransferError as e:
        raise HTTPException(status_code=500, detail=str(e))
