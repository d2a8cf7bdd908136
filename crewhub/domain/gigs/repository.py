"""Gig repository - Database operations for gigs and applications"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import Application, Gig, GigDate, GigLocation


class GigRepository:
    """Repository for gig database operations"""

    @staticmethod
    def slug_exists(db: Session, slug: str) -> bool:
        return db.query(Gig.id).filter(Gig.slug == slug).first() is not None

    @staticmethod
    def get_by_id(db: Session, gig_id: int) -> Optional[Gig]:
        return db.query(Gig).filter(Gig.id == gig_id).first()

    @staticmethod
    def get_by_id_or_slug(db: Session, id_or_slug: str) -> Optional[Gig]:
        """Numeric values are looked up as ids, anything else as a slug"""
        query = db.query(Gig).options(selectinload(Gig.dates), selectinload(Gig.locations))
        if id_or_slug.isdigit():
            return query.filter(Gig.id == int(id_or_slug)).first()
        return query.filter(Gig.slug == id_or_slug).first()

    @staticmethod
    def list_active(db: Session, page: int, limit: int) -> tuple[list[Gig], int]:
        query = db.query(Gig).filter(Gig.status == "active")
        total = query.count()
        gigs = (
            query.options(selectinload(Gig.dates), selectinload(Gig.locations))
            .order_by(Gig.created_at.desc(), Gig.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return gigs, total

    @staticmethod
    def list_by_creator(db: Session, creator_id: int) -> list[Gig]:
        return (
            db.query(Gig)
            .options(selectinload(Gig.dates), selectinload(Gig.locations))
            .filter(Gig.creator_id == creator_id)
            .order_by(Gig.created_at.desc(), Gig.id.desc())
            .all()
        )

    @staticmethod
    def create(
        db: Session, creator_id: int, dates: list[dict], locations: list[str], **gig_data
    ) -> Gig:
        gig = Gig(creator_id=creator_id, **gig_data)
        gig.dates = [GigDate(**entry) for entry in dates]
        gig.locations = [GigLocation(location=location) for location in locations]
        db.add(gig)
        db.commit()
        db.refresh(gig)
        return gig

    @staticmethod
    def update(
        db: Session,
        gig: Gig,
        dates: Optional[list[dict]] = None,
        locations: Optional[list[str]] = None,
        **updates,
    ) -> Gig:
        for key, value in updates.items():
            if hasattr(gig, key):
                setattr(gig, key, value)
        if dates is not None:
            gig.dates = [GigDate(**entry) for entry in dates]
        if locations is not None:
            gig.locations = [GigLocation(location=location) for location in locations]
        db.commit()
        db.refresh(gig)
        return gig

    @staticmethod
    def delete(db: Session, gig: Gig) -> None:
        db.delete(gig)
        db.commit()

    @staticmethod
    def count_applications(db: Session, gig_id: int) -> int:
        return db.query(func.count(Application.id)).filter(Application.gig_id == gig_id).scalar()

    # Application Methods
    @staticmethod
    def get_application(db: Session, gig_id: int, applicant_id: int) -> Optional[Application]:
        return (
            db.query(Application)
            .filter(Application.gig_id == gig_id, Application.applicant_id == applicant_id)
            .first()
        )

    @staticmethod
    def get_application_by_id(db: Session, application_id: int) -> Optional[Application]:
        return db.query(Application).filter(Application.id == application_id).first()

    @staticmethod
    def add_application(db: Session, gig_id: int, applicant_id: int, **data) -> Application:
        """Stage an application; committed together with its notification"""
        application = Application(gig_id=gig_id, applicant_id=applicant_id, **data)
        db.add(application)
        db.flush()
        return application

    @staticmethod
    def list_applications(db: Session, gig_id: int) -> list[Application]:
        return (
            db.query(Application)
            .options(selectinload(Application.applicant))
            .filter(Application.gig_id == gig_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all()
        )

    @staticmethod
    def list_applications_for_user(db: Session, applicant_id: int) -> list[Application]:
        return (
            db.query(Application)
            .options(selectinload(Application.gig))
            .filter(Application.applicant_id == applicant_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all()
        )
