# eventnest/routes/certificates_fastapi.py
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.orm import Session

from eventnest.auth import ensure_can_manage, get_current_user, require
from eventnest.database import get_db
from eventnest.models.user import User
from eventnest.policy import Action
from eventnest.schemas.certificate import CertificateGenerationResult, CertificateRead, CertificateVerification
from eventnest.services import Services, get_services

router = APIRouter(
    tags=["Certificates"],
)


@router.get("/users/me/certificates", response_model=List[CertificateRead])
def read_my_certificates(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return services.certificates.list_for_user(db, current_user.id)


@router.get("/certificates/{certificate_id}/download", response_class=FileResponse)
def download_certificate(
    certificate_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    path, filename = services.certificates.download(db, certificate_id, current_user)
    return FileResponse(path, media_type="application/pdf", filename=filename)


@router.get("/certificates/{certificate_id}/verify", response_model=CertificateVerification)
def verify_certificate(
    certificate_id: str,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Public endpoint used by the certificate verification page."""
    result = services.certificates.verify(db, certificate_id)
    if not result["valid"]:
        return JSONResponse(status_code=404, content=result)
    return result


@router.post("/events/{event_id}/generate-certificates", response_model=CertificateGenerationResult)
def generate_certificates(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.ISSUE_CERTIFICATES)),
    services: Services = Depends(get_services),
):
    event = services.registrations.get_event(db, event_id)
    ensure_can_manage(current_user, event)

    result = services.certificates.generate(db, event)
    body = CertificateGenerationResult(
        message=result.message,
        generated=result.generated,
        failed=result.failed,
        total_eligible=result.total_eligible,
    )
    return JSONResponse(status_code=201 if result.processed else 200, content=body.dict())
