"""
Marketing Repository - discounts and campaigns
"""
from typing import Dict

from sqlalchemy.orm import Session

from store_admin.models import Discount, MarketingCampaign


class MarketingRepository:

    def __init__(self, db: Session):
        self.db = db

    def discount_code_exists(self, store_id: str, code: str) -> bool:
        return (
            self.db.query(Discount.id)
            .filter(Discount.store_id == store_id, Discount.code == code)
            .first()
        ) is not None

    def create_discount(self, store_id: str, fields: Dict) -> Discount:
        discount = Discount(store_id=store_id, **fields)
        self.db.add(discount)
        self.db.commit()
        self.db.refresh(discount)
        return discount

    def create_campaign(self, store_id: str, fields: Dict) -> MarketingCampaign:
        campaign = MarketingCampaign(store_id=store_id, **fields)
        self.db.add(campaign)
        self.db.commit()
        self.db.refresh(campaign)
        return campaign
