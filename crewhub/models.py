
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    auth_uid = Column(String(255), unique=True, index=True, nullable=False)  # Auth provider "sub"
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    handle = Column(String(100), unique=True, nullable=True)  # e.g. @avap
    primary_role = Column(String(100), nullable=True)  # Producer, Editor, ...
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)  # Object store URL
    banner_url = Column(String(500), nullable=True)
    resume_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)
    day_rate = Column(Float, nullable=True)
    currency = Column(String(3), nullable=True)
    experience_level = Column(String(50), nullable=True)  # entry, mid, senior
    phone = Column(String(50), nullable=True)
    profile_completion_percentage = Column(Integer, default=0, nullable=False)
    visible_in_explore = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    gigs = relationship("Gig", back_populates="creator")
    applications = relationship("Application", back_populates="applicant")


class Gig(Base):
    __tablename__ = "gigs"

    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    qualifying_criteria = Column(Text, nullable=True)
    budget_amount = Column(Float, nullable=True)
    currency = Column(String(3), default="AED", nullable=False)
    request_quote = Column(Boolean, default=False, nullable=False)
    application_deadline = Column(Date, nullable=True)
    status = Column(String(20), default="active", nullable=False)  # draft, active, closed
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    creator = relationship("UserProfile", back_populates="gigs")
    dates = relationship(
        "GigDate", back_populates="gig", cascade="all, delete-orphan", order_by="GigDate.id"
    )
    locations = relationship(
        "GigLocation", back_populates="gig", cascade="all, delete-orphan", order_by="GigLocation.id"
    )
    applications = relationship(
        "Application", back_populates="gig", cascade="all, delete-orphan"
    )


class GigDate(Base):
    __tablename__ = "gig_dates"

    id = Column(Integer, primary_key=True, index=True)
    gig_id = Column(Integer, ForeignKey("gigs.id", ondelete="CASCADE"), nullable=False)
    month = Column(String(20), nullable=False)  # "Sep 2025"
    days = Column(String(255), nullable=False)  # "1-5, 10, 15-20"
    label = Column(String(100), nullable=True)  # e.g. "Shoot", "Post-production"

    gig = relationship("Gig", back_populates="dates")


class GigLocation(Base):
    __tablename__ = "gig_locations"

    id = Column(Integer, primary_key=True, index=True)
    gig_id = Column(Integer, ForeignKey("gigs.id", ondelete="CASCADE"), nullable=False)
    location = Column(String(255), nullable=False)

    gig = relationship("Gig", back_populates="locations")


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("gig_id", "applicant_id", name="uq_application_gig_user"),)

    id = Column(Integer, primary_key=True, index=True)
    gig_id = Column(Integer, ForeignKey("gigs.id", ondelete="CASCADE"), nullable=False)
    applicant_id = Column(
        Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False
    )
    cover_note = Column(Text, nullable=True)
    portfolio_url = Column(String(500), nullable=True)
    resume_url = Column(String(500), nullable=True)
    status = Column(
        String(20), default="pending", nullable=False
    )  # pending, shortlisted, confirmed, released
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    gig = relationship("Gig", back_populates="applications")
    applicant = relationship("UserProfile", back_populates="applications")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(50), nullable=False)  # application_received, status_changed, ...
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    link = Column(String(500), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class CollabPost(Base):
    __tablename__ = "collab_posts"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    summary = Column(Text, nullable=False)
    cover_image_url = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    status = Column(String(20), default="open", nullable=False)  # open, closed
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("UserProfile")
    tags = relationship(
        "CollabTag", back_populates="collab", cascade="all, delete-orphan", order_by="CollabTag.id"
    )
    interests = relationship(
        "CollabInterest", back_populates="collab", cascade="all, delete-orphan"
    )


class CollabTag(Base):
    __tablename__ = "collab_tags"

    id = Column(Integer, primary_key=True, index=True)
    collab_id = Column(Integer, ForeignKey("collab_posts.id", ondelete="CASCADE"), nullable=False)
    tag = Column(String(50), nullable=False, index=True)

    collab = relationship("CollabPost", back_populates="tags")


class CollabInterest(Base):
    __tablename__ = "collab_interests"
    __table_args__ = (UniqueConstraint("collab_id", "user_id", name="uq_collab_interest_user"),)

    id = Column(Integer, primary_key=True, index=True)
    collab_id = Column(Integer, ForeignKey("collab_posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    collab = relationship("CollabPost", back_populates="interests")
    user = relationship("UserProfile")


class WhatsOnEvent(Base):
    __tablename__ = "whatson_events"

    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(
        Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String(200), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    is_online = Column(Boolean, default=False, nullable=False)
    location = Column(String(255), nullable=True)
    online_link = Column(String(500), nullable=True)
    is_paid = Column(Boolean, default=False, nullable=False)
    price = Column(Float, nullable=True)
    currency = Column(String(3), default="AED", nullable=False)
    is_unlimited = Column(Boolean, default=False, nullable=False)
    total_spots = Column(Integer, nullable=True)
    max_spots_per_person = Column(Integer, default=1, nullable=False)
    status = Column(String(20), default="published", nullable=False)  # draft, published, cancelled
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    creator = relationship("UserProfile")
    schedule = relationship(
        "WhatsOnSchedule",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="WhatsOnSchedule.event_date",
    )
    tags = relationship(
        "WhatsOnTag", back_populates="event", cascade="all, delete-orphan", order_by="WhatsOnTag.id"
    )
    rsvps = relationship("WhatsOnRsvp", back_populates="event", cascade="all, delete-orphan")


class WhatsOnSchedule(Base):
    __tablename__ = "whatson_schedule"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("whatson_events.id", ondelete="CASCADE"), nullable=False
    )
    event_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # "21:00"
    end_time = Column(String(5), nullable=False)
    timezone = Column(String(10), default="IST", nullable=False)

    event = relationship("WhatsOnEvent", back_populates="schedule")


class WhatsOnTag(Base):
    __tablename__ = "whatson_tags"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("whatson_events.id", ondelete="CASCADE"), nullable=False
    )
    tag = Column(String(50), nullable=False, index=True)

    event = relationship("WhatsOnEvent", back_populates="tags")


class WhatsOnRsvp(Base):
    __tablename__ = "whatson_rsvps"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_whatson_rsvp_user"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("whatson_events.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False)
    number_of_spots = Column(Integer, default=1, nullable=False)
    ticket_number = Column(String(20), unique=True, index=True, nullable=False)  # WO-2025-000001
    reference_number = Column(String(14), unique=True, index=True, nullable=False)  # #XXXXXXXXXXXXX
    payment_status = Column(String(20), nullable=False)  # pending, paid, not_required
    status = Column(String(20), default="confirmed", nullable=False)  # confirmed, cancelled
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    event = relationship("WhatsOnEvent", back_populates="rsvps")
    user = relationship("UserProfile")
    dates = relationship("WhatsOnRsvpDate", back_populates="rsvp", cascade="all, delete-orphan")


class WhatsOnRsvpDate(Base):
    __tablename__ = "whatson_rsvp_dates"

    id = Column(Integer, primary_key=True, index=True)
    rsvp_id = Column(Integer, ForeignKey("whatson_rsvps.id", ondelete="CASCADE"), nullable=False)
    schedule_id = Column(
        Integer, ForeignKey("whatson_schedule.id", ondelete="CASCADE"), nullable=False
    )

    rsvp = relationship("WhatsOnRsvp", back_populates="dates")
    schedule = relationship("WhatsOnSchedule")


class CrewAvailability(Base):
    __tablename__ = "crew_availability"
    __table_args__ = (
        UniqueConstraint("user_id", "availability_date", name="uq_availability_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False)
    availability_date = Column(Date, nullable=False, index=True)
    status = Column(String(20), nullable=False)  # available, hold, na
    note = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
