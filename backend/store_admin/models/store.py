"""
Modelos de tenant: usuarios, tiendas y su configuración
"""
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from store_admin.core.database import Base
from store_admin.models.common import new_id, utcnow


class User(Base):
    """
    Dashboard account. Mirrors the NextAuth user the session token refers to.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255))
    role = Column(String(50), default="user")

    created_at = Column(DateTime(timezone=True), default=utcnow)

    stores = relationship("Store", back_populates="owner")


class Store(Base):
    """
    Tenant - owns products, categories, orders and settings
    """
    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    subdomain = Column(String(100), nullable=False, unique=True, index=True)

    # Identidad
    name = Column(String(255), nullable=False)
    description = Column(Text)
    currency = Column(String(3), default="USD")
    logo = Column(String(500))
    primary_color = Column(String(20))

    # Contacto
    email = Column(String(255))
    phone = Column(String(50))
    address = Column(Text)

    # Redes sociales
    facebook = Column(String(500))
    instagram = Column(String(500))
    twitter = Column(String(500))
    youtube = Column(String(500))

    # SEO / banner
    meta_title = Column(String(255))
    meta_description = Column(Text)
    keywords = Column(Text)
    banner_image = Column(String(500))
    banner_title = Column(String(255))
    banner_subtitle = Column(String(255))

    # Metadata
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="stores")
    settings = relationship(
        "StoreSettings", back_populates="store", uselist=False, cascade="all, delete-orphan"
    )
    categories = relationship("Category", back_populates="store", cascade="all, delete-orphan")
    products = relationship("Product", back_populates="store", cascade="all, delete-orphan")
    pages = relationship("Page", back_populates="store", cascade="all, delete-orphan")
    customers = relationship("Customer", back_populates="store", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="store", cascade="all, delete-orphan")
    discounts = relationship("Discount", back_populates="store", cascade="all, delete-orphan")
    campaigns = relationship("MarketingCampaign", back_populates="store", cascade="all, delete-orphan")


class StoreSettings(Base):
    """
    Configuración de la tienda (1:1 con Store)

    Scalar fields are edited individually; the JSON columns are settings blobs
    the dashboard forms read and write wholesale.
    """
    __tablename__ = "store_settings"

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, unique=True)

    # General
    time_zone = Column(String(64))
    weight_unit = Column(String(8))
    length_unit = Column(String(8))

    # Business details
    business_name = Column(String(255))
    business_email = Column(String(255))
    business_phone = Column(String(50))
    business_address = Column(Text)
    business_city = Column(String(100))
    business_state = Column(String(100))
    business_zip = Column(String(20))
    business_country = Column(String(100))
    business_type = Column(String(100))
    tax_id = Column(String(100))

    # Analytics
    google_analytics_id = Column(String(100))
    facebook_pixel_id = Column(String(100))
    tiktok_pixel_id = Column(String(100))

    # Social URLs
    facebook_url = Column(String(500))
    instagram_url = Column(String(500))
    twitter_url = Column(String(500))
    linkedin_url = Column(String(500))
    youtube_url = Column(String(500))
    tiktok_url = Column(String(500))

    # SEO
    meta_title = Column(String(255))
    meta_description = Column(Text)
    meta_keywords = Column(Text)

    # Advanced
    enable_password_protection = Column(Boolean, default=False)
    store_password = Column(String(255))
    enable_age_verification = Column(Boolean, default=False)
    minimum_age = Column(Integer)
    enable_maintenance_mode = Column(Boolean, default=False)
    maintenance_message = Column(Text)

    # Settings blobs
    currencies = Column(JSON)
    auto_update_rates = Column(Boolean, default=False)
    business_hours = Column(JSON)
    checkout_settings = Column(JSON)
    order_settings = Column(JSON)
    stock_settings = Column(JSON)
    tax_settings = Column(JSON)
    payment_methods = Column(JSON)
    shipping_zones = Column(JSON)
    gift_card_settings = Column(JSON)
    locations = Column(JSON)
    staff_users = Column(JSON)
    email_settings = Column(JSON)
    inventory = Column(JSON)
    extra = Column(JSON)

    # Metadata
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    store = relationship("Store", back_populates="settings")
