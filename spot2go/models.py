import enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Role(str, enum.Enum):
    CUSTOMER = "customer"
    OWNER = "owner"
    ADMIN = "admin"


class AuthProvider(str, enum.Enum):
    LOCAL = "local"
    GOOGLE = "google"
    APPLE = "apple"


class PlaceStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)  # Null for some OAuth accounts
    phone = Column(String(50), nullable=True)
    password = Column(String(255), nullable=True)  # bcrypt hash, null for OAuth-only accounts
    role = Column(String(20), nullable=False, default=Role.CUSTOMER.value)
    provider = Column(String(20), nullable=False, default=AuthProvider.LOCAL.value)
    provider_id = Column(String(255), nullable=True, index=True)
    # Only the SHA-256 hash of the emailed token is stored
    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(DateTime, nullable=True)
    settings = Column(JSON, nullable=True)  # Notification preferences
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    places = relationship("Place", back_populates="owner")
    bookings = relationship("Booking", back_populates="user")
    reviews = relationship("Review", back_populates="user")
    devices = relationship("UserDevice", back_populates="user", cascade="all, delete-orphan")
    bookmarked_places = relationship("Place", secondary="user_bookmarks", viewonly=True)


class Place(Base):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(String(100), nullable=True)  # cafe, library, coworking, university...
    rating = Column(Float, default=0.0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    description = Column(Text, nullable=True)
    amenities = Column(JSON, default=list)
    images = Column(JSON, default=list)  # Public image URLs
    location = Column(JSON, nullable=True)  # {address, lat, lng}
    status = Column(String(20), default=PlaceStatus.PENDING.value, nullable=False, index=True)
    reservable = Column(Boolean, default=False, nullable=False)
    reservable_hours = Column(JSON, nullable=True)  # {start: "HH:MM", end: "HH:MM"}
    max_capacity = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="places")
    menu_items = relationship("MenuItem", back_populates="place", order_by="MenuItem.id")
    bundles = relationship("Bundle", back_populates="place", order_by="Bundle.id")
    reviews = relationship(
        "Review", back_populates="place", order_by=lambda: (Review.created_at.desc(), Review.id.desc())
    )
    bookings = relationship("Booking", back_populates="place")


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    available = Column(Boolean, default=True, nullable=False)

    place = relationship("Place", back_populates="menu_items")


class Bundle(Base):
    __tablename__ = "bundles"

    id = Column(Integer, primary_key=True, index=True)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    price = Column(Float, nullable=False)

    place = relationship("Place", back_populates="bundles")
    bundle_items = relationship("BundleItem", back_populates="bundle", cascade="all, delete-orphan")


class BundleItem(Base):
    __tablename__ = "bundle_items"

    bundle_id = Column(Integer, ForeignKey("bundles.id"), primary_key=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), primary_key=True)
    quantity = Column(Integer, default=1, nullable=False)

    bundle = relationship("Bundle", back_populates="bundle_items")
    menu_item = relationship("MenuItem")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False, index=True)
    # pending, paid, cancelled - no enforced transition table
    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False)
    amount = Column(Float, nullable=True)
    payment_id = Column(String(255), nullable=True)
    date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    ticket_id = Column(String(32), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="bookings")
    place = relationship("Place", back_populates="bookings")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="reviews")
    place = relationship("Place", back_populates="reviews")


class UserBookmark(Base):
    __tablename__ = "user_bookmarks"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    place_id = Column(Integer, ForeignKey("places.id"), primary_key=True)
    created_at = Column(DateTime, server_default=func.now())


class UserDevice(Base):
    __tablename__ = "user_devices"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    fcm_token = Column(String(512), unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="devices")
