# app/data/seed.py
from decimal import Decimal

from sqlalchemy import select

from app.data.database import SessionLocal
from app.data.models import CategoryModel, ItemModel, UserModel
from app.domain.enums import UserType
from app.services.auth_service import hash_password
from app.utils.logging import get_logger
from app.utils.settings import ADMIN_NAME, ADMIN_PASSWORD, ADMIN_PHONE

logger = get_logger(__name__)

SAMPLE_MENU = {
    "Lanches": [("X-Burguer", "25.90"), ("X-Salada", "27.50")],
    "Pizzas": [("Pizza Margherita", "49.90"), ("Pizza Calabresa", "52.00")],
    "Bebidas": [("Refrigerante Lata", "6.50"), ("Suco Natural", "9.00")],
}


def seed(db=None):
    """
    Admin account + sample menu.
    Only fills what is missing, safe to run on every start.
    """
    own_session = db is None
    db = db or SessionLocal()
    try:
        if not db.execute(select(UserModel).where(UserModel.phone == ADMIN_PHONE)).scalar_one_or_none():
            db.add(
                UserModel(
                    nome=ADMIN_NAME,
                    phone=ADMIN_PHONE,
                    password_hash=hash_password(ADMIN_PASSWORD),
                    type=UserType.ADMIN.value,
                )
            )
            logger.info(f"Seeded admin user {ADMIN_PHONE}")

        # not forcing: only seed the menu if empty
        if not db.execute(select(CategoryModel.id).limit(1)).first():
            for description, items in SAMPLE_MENU.items():
                category = CategoryModel(description=description)
                category.items = [
                    ItemModel(description=name, unit_price=Decimal(price)) for name, price in items
                ]
                db.add(category)
            logger.info(f"Seeded {len(SAMPLE_MENU)} categories")

        db.commit()
    finally:
        if own_session:
            db.close()
