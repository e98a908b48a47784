"""Service listing CRUD."""

from sqlalchemy.orm import Session

from app.core.errors import ListingNotFoundError
from app.models.service_listing import ServiceListing


def list_active(session: Session) -> list[ServiceListing]:
    return (
        session.query(ServiceListing)
        .filter(ServiceListing.is_active.is_(True))
        .order_by(ServiceListing.created_at.desc(), ServiceListing.id.desc())
        .all()
    )


def create_listing(
    session: Session,
    title: str,
    description: str,
    image: str,
    link: str | None = None,
) -> ServiceListing:
    listing = ServiceListing(
        title=title.strip(),
        description=description,
        image=image,
        link=link or None,
    )
    session.add(listing)
    session.commit()
    session.refresh(listing)
    return listing


def get_listing(session: Session, listing_id: int) -> ServiceListing:
    listing = session.get(ServiceListing, listing_id)
    if listing is None:
        raise ListingNotFoundError("Service not found")
    return listing


def update_listing(
    session: Session,
    listing_id: int,
    title: str | None = None,
    description: str | None = None,
    image: str | None = None,
    link: str | None = None,
) -> ServiceListing:
    """Apply the non-None fields. Raises ListingNotFoundError if absent."""
    listing = get_listing(session, listing_id)
    if title is not None:
        listing.title = title.strip()
    if description is not None:
        listing.description = description
    if image is not None:
        listing.image = image
    if link is not None:
        listing.link = link or None
    session.commit()
    session.refresh(listing)
    return listing


def delete_listing(session: Session, listing_id: int) -> str:
    """Delete the listing and return the image path it referenced."""
    listing = get_listing(session, listing_id)
    image = listing.image
    session.delete(listing)
    session.commit()
    return image
