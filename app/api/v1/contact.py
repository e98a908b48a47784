"""Contact form relay: forward a visitor message to the site administrator by email."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.config import Settings, get_settings
from app.core.errors import MailDeliveryError
from app.schemas.auth import MessageResponse
from app.schemas.contact import ContactRequest
from app.services.mailer import Mailer, format_contact_message, get_mailer

router = APIRouter()


@router.post("", response_model=MessageResponse)
def post_contact(
    body: ContactRequest,
    mailer: Annotated[Mailer, Depends(get_mailer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    if not settings.ADMIN_EMAIL:
        raise MailDeliveryError("Email delivery is not configured.")
    mailer.send(
        settings.ADMIN_EMAIL,
        subject=f"Nouveau contact de {body.name}",
        body=format_contact_message(
            name=body.name,
            email=str(body.email),
            message=body.message,
            phone=body.phone,
            postal_code=body.postal_code,
            objectif=body.objectif,
        ),
        reply_to=str(body.email),
    )
    return MessageResponse(message="Email envoyé avec succès")
