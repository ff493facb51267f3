"""Client endpoints"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from invoice_service.api.v1.schemas import ClientRequest, ClientResponse
from invoice_service.api.dependencies import get_request_id, get_user_id, parse_uuid
from invoice_service.infrastructure.database.session import get_db
from invoice_service.infrastructure.database.repositories import ClientRepository
from invoice_service.domain.exceptions import ClientInUseError, ClientNotFoundError

router = APIRouter()


@router.get("/clients", response_model=List[ClientResponse])
def list_clients(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return [ClientResponse.model_validate(c) for c in ClientRepository(db).get_clients_by_user(user_id)]


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(request_body: ClientRequest, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    db_client = ClientRepository(db).create_client(user_id, request_body.model_dump())
    db.commit()
    db.refresh(db_client)
    return ClientResponse.model_validate(db_client)


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(client_id: str, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    client_uuid = parse_uuid(client_id, "client")

    try:
        db_client = ClientRepository(db).get_client(user_id, client_uuid)
    except ClientNotFoundError:
        raise HTTPException(status_code=404, detail="Client not found")

    return ClientResponse.model_validate(db_client)


@router.put("/clients/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: str,
    request_body: ClientRequest,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    client_uuid = parse_uuid(client_id, "client")

    try:
        db_client = ClientRepository(db).update_client(user_id, client_uuid, request_body.model_dump())
        db.commit()
        db.refresh(db_client)
    except ClientNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Client not found")

    return ClientResponse.model_validate(db_client)


@router.delete("/clients/{client_id}", status_code=204)
def delete_client(
    client_id: str,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Delete a client that has no invoices"""
    client_uuid = parse_uuid(client_id, "client")

    try:
        ClientRepository(db).delete_client(user_id, client_uuid)
        db.commit()

    except ClientNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Client not found")

    except ClientInUseError as e:
        db.rollback()
        logging.warning(f"Client still invoiced: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=409, detail="Client has invoices and cannot be deleted")

    return Response(status_code=204)
