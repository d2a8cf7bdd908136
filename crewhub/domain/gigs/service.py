"""Gig service - Business logic for gigs and gig applications"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import FRONTEND_URL
from ...models import Application, Gig, UserProfile
from ...shared.responses import normalize_pagination, pagination_meta
from ...utils.calendar_utils import transform_calendar_months
from ...utils.formatting import format_budget_label
from ...utils.slugs import generate_unique_slug
from ..notifications.service import APPLICATION_RECEIVED, STATUS_CHANGED, notify
from ..profiles.service import require_complete_profile, serialize_profile_summary
from .repository import GigRepository
from .schemas import ApplicationCreate, ApplicationStatusUpdate, GigCreate, GigUpdate

logger = logging.getLogger(__name__)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_gig(gig: Gig, include_creator: bool = True) -> dict:
    data = {
        "id": gig.id,
        "slug": gig.slug,
        "title": gig.title,
        "description": gig.description,
        "qualifying_criteria": gig.qualifying_criteria,
        "budget_amount": gig.budget_amount,
        "currency": gig.currency,
        "request_quote": gig.request_quote,
        "budgetLabel": format_budget_label(gig.budget_amount, gig.currency, gig.request_quote),
        "status": gig.status,
        "application_deadline": _iso(gig.application_deadline),
        "dates": [{"month": d.month, "days": d.days, "label": d.label} for d in gig.dates],
        "calendarMonths": transform_calendar_months(gig.dates),
        "locations": [loc.location for loc in gig.locations],
        "created_at": _iso(gig.created_at),
    }
    if include_creator:
        data["creator"] = serialize_profile_summary(gig.creator)
    return data


def serialize_application(application: Application, include_gig: bool = False) -> dict:
    data = {
        "id": application.id,
        "gig_id": application.gig_id,
        "status": application.status,
        "cover_note": application.cover_note,
        "portfolio_url": application.portfolio_url,
        "resume_url": application.resume_url,
        "created_at": _iso(application.created_at),
        "updated_at": _iso(application.updated_at),
        "applicant": serialize_profile_summary(application.applicant),
    }
    if include_gig and application.gig is not None:
        gig = application.gig
        data["gig"] = {
            "id": gig.id,
            "slug": gig.slug,
            "title": gig.title,
            "status": gig.status,
            "budgetLabel": format_budget_label(gig.budget_amount, gig.currency, gig.request_quote),
        }
    return data


class GigService:
    """Service layer for gig business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = GigRepository()

    def _get_gig(self, gig_id: int) -> Gig:
        gig = self.repo.get_by_id(self.db, gig_id)
        if not gig:
            raise HTTPException(status_code=404, detail="Gig not found")
        return gig

    def _get_own_gig(self, gig_id: int, user: UserProfile) -> Gig:
        gig = self._get_gig(gig_id)
        if gig.creator_id != user.id:
            raise HTTPException(status_code=403, detail="Only the gig creator can do this")
        return gig

    def list_gigs(self, page: Optional[int], limit: Optional[int]) -> dict:
        page, limit = normalize_pagination(page, limit)
        gigs, total = self.repo.list_active(self.db, page, limit)
        return {
            "gigs": [serialize_gig(g) for g in gigs],
            "pagination": pagination_meta(page, limit, total),
        }

    def list_my_gigs(self, user: UserProfile) -> list[dict]:
        result = []
        for gig in self.repo.list_by_creator(self.db, user.id):
            data = serialize_gig(gig, include_creator=False)
            data["applicationCount"] = self.repo.count_applications(self.db, gig.id)
            result.append(data)
        return result

    def get_gig(self, id_or_slug: str) -> dict:
        gig = self.repo.get_by_id_or_slug(self.db, id_or_slug)
        if not gig:
            raise HTTPException(status_code=404, detail="Gig not found")
        return serialize_gig(gig)

    def create_gig(self, data: GigCreate, user: UserProfile) -> dict:
        require_complete_profile(user, "post a gig")

        slug = generate_unique_slug(data.title, lambda s: self.repo.slug_exists(self.db, s))
        gig = self.repo.create(
            self.db,
            user.id,
            dates=[d.model_dump() for d in data.dates],
            locations=data.locations,
            title=data.title,
            slug=slug,
            description=data.description,
            qualifying_criteria=data.qualifying_criteria,
            budget_amount=data.budget_amount,
            currency=data.currency,
            request_quote=data.request_quote,
            application_deadline=data.application_deadline,
            status=data.status,
        )
        logger.info(f"✅ Gig {gig.id} '{gig.slug}' created by user {user.id}")
        return serialize_gig(gig)

    def update_gig(self, gig_id: int, data: GigUpdate, user: UserProfile) -> dict:
        gig = self._get_own_gig(gig_id, user)

        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True, exclude={"dates", "locations"}).items()
            if value is not None
        }
        dates = [d.model_dump() for d in data.dates] if data.dates is not None else None

        gig = self.repo.update(self.db, gig, dates=dates, locations=data.locations, **updates)
        logger.info(f"✅ Gig {gig.id} updated by user {user.id}")
        return serialize_gig(gig)

    def delete_gig(self, gig_id: int, user: UserProfile) -> None:
        gig = self._get_own_gig(gig_id, user)
        self.repo.delete(self.db, gig)
        logger.info(f"🗑️ Gig {gig_id} deleted by user {user.id}")

    # Application Methods
    def apply(self, gig_id: int, data: ApplicationCreate, user: UserProfile) -> dict:
        gig = self._get_gig(gig_id)
        require_complete_profile(user, "apply to gigs")

        if gig.creator_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot apply to your own gig")
        if gig.status != "active":
            raise HTTPException(status_code=400, detail="This gig is not accepting applications")
        if self.repo.get_application(self.db, gig.id, user.id):
            raise HTTPException(status_code=409, detail="You have already applied to this gig")

        try:
            application = self.repo.add_application(
                self.db,
                gig.id,
                user.id,
                cover_note=data.cover_note,
                portfolio_url=data.portfolio_url or user.portfolio_url,
                resume_url=data.resume_url or user.resume_url,
            )
            notify(
                self.db,
                gig.creator_id,
                APPLICATION_RECEIVED,
                title=f"New application for {gig.title}",
                message=f"{user.full_name or user.handle or 'A crew member'} applied to your gig",
                link=f"{FRONTEND_URL}/gigs/manage-gigs?gig={gig.id}",
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=409, detail="You have already applied to this gig"
            ) from e

        self.db.refresh(application)
        logger.info(f"📨 User {user.id} applied to gig {gig.id}")
        return serialize_application(application)

    def list_applications(self, gig_id: int, user: UserProfile) -> list[dict]:
        gig = self._get_own_gig(gig_id, user)
        return [serialize_application(a) for a in self.repo.list_applications(self.db, gig.id)]

    def update_application_status(
        self, gig_id: int, application_id: int, data: ApplicationStatusUpdate, user: UserProfile
    ) -> dict:
        gig = self._get_own_gig(gig_id, user)
        application = self.repo.get_application_by_id(self.db, application_id)
        if not application or application.gig_id != gig.id:
            raise HTTPException(status_code=404, detail="Application not found")

        previous = application.status
        application.status = data.status
        if previous != data.status:
            notify(
                self.db,
                application.applicant_id,
                STATUS_CHANGED,
                title=f"Application update: {gig.title}",
                message=f"Your application status changed from {previous} to {data.status}",
                link=f"{FRONTEND_URL}/gigs/{gig.slug}",
            )
        self.db.commit()
        self.db.refresh(application)

        logger.info(f"✅ Application {application.id} moved {previous} -> {data.status}")
        return serialize_application(application)

    def list_my_applications(self, user: UserProfile) -> list[dict]:
        return [
            serialize_application(a, include_gig=True)
            for a in self.repo.list_applications_for_user(self.db, user.id)
        ]

    def get_application(self, application_id: int, user: UserProfile) -> dict:
        application = self.repo.get_application_by_id(self.db, application_id)
        if not application:
            raise HTTPException(status_code=404, detail="Application not found")
        if user.id not in (application.applicant_id, application.gig.creator_id):
            raise HTTPException(status_code=403, detail="You cannot view this application")
        return serialize_application(application, include_gig=True)
