"""/v1/domains - CRUD over a user's domain portfolio"""

from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from domainfolio.api.dependencies import parse_uuid
from domainfolio.api.v1.schemas import DomainCreateRequest, DomainFields, DomainResponse
from domainfolio.infrastructure.database.models import DomainRecord
from domainfolio.infrastructure.database.session import get_db
from domainfolio.infrastructure.database.repositories import DomainRepository, to_domain

router = APIRouter()


def _to_response(record: DomainRecord) -> DomainResponse:
    return DomainResponse(user_id=record.user_id, **asdict(to_domain(record)))


def _get_or_404(repo: DomainRepository, domain_id: str) -> DomainRecord:
    record = repo.get_domain(parse_uuid(domain_id, "domain ID"))
    if not record:
        raise HTTPException(status_code=404, detail="Domain not found")
    return record


@router.post("/domains", response_model=DomainResponse, status_code=201)
def create_domain(request_body: DomainCreateRequest, db: Session = Depends(get_db)):
    """Add a domain to a user's portfolio"""
    repo = DomainRepository(db)
    fields = request_body.model_dump(exclude={"user_id"})
    record = repo.create_domain(request_body.user_id, fields)
    db.commit()
    db.refresh(record)
    return _to_response(record)


@router.get("/domains", response_model=List[DomainResponse])
def list_domains(
    user_id: str = Query(..., description="Portfolio owner"),
    db: Session = Depends(get_db),
):
    return [_to_response(r) for r in DomainRepository(db).list_domains(user_id)]


@router.get("/domains/{domain_id}", response_model=DomainResponse)
def get_domain(domain_id: str, db: Session = Depends(get_db)):
    return _to_response(_get_or_404(DomainRepository(db), domain_id))


@router.put("/domains/{domain_id}", response_model=DomainResponse)
def update_domain(domain_id: str, request_body: DomainFields, db: Session = Depends(get_db)):
    """Replace a domain's editable attributes"""
    repo = DomainRepository(db)
    record = _get_or_404(repo, domain_id)
    repo.update_domain(record, request_body.model_dump())
    db.commit()
    db.refresh(record)
    return _to_response(record)


@router.delete("/domains/{domain_id}", status_code=204)
def delete_domain(domain_id: str, db: Session = Depends(get_db)):
    """Remove a domain and, by cascade, its transactions"""
    repo = DomainRepository(db)
    repo.delete_domain(_get_or_404(repo, domain_id))
    db.commit()
    return Response(status_code=204)
