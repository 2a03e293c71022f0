import os

# must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.data import models  # noqa: F401
from app.data.database import Base, build_engine, get_db
from app.data.models import AddressModel, CategoryModel, ItemModel, UserModel
from app.domain.enums import UserType
from app.main import app
from app.services.auth_service import create_access_token, hash_password

PASSWORD = "senha123"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, nome, phone, user_type=UserType.CLIENT, password=PASSWORD):
    user = UserModel(
        nome=nome,
        phone=phone,
        password_hash=hash_password(password),
        type=user_type.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_address(db, user):
    address = AddressModel(
        user_id=user.id,
        street="Rua da Bahia",
        number="100",
        district="Centro",
        city="Belo Horizonte",
        state="MG",
        zip_code="30160011",
    )
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def auth_header(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.type, user.phone)}"}


@pytest.fixture
def admin(db):
    return make_user(db, "Administrador", "31999999999", UserType.ADMIN)


@pytest.fixture
def customer(db):
    user = make_user(db, "Maria Silva", "31988887777")
    make_address(db, user)
    return user


@pytest.fixture
def other_customer(db):
    user = make_user(db, "Joao Souza", "31977776666")
    make_address(db, user)
    return user


@pytest.fixture
def homeless(db):
    return make_user(db, "Pedro Lima", "31966665555")


@pytest.fixture
def menu(db):
    """Two categories, three items: 15.90, 14.00 and 6.50."""
    food = CategoryModel(description="Lanches")
    drinks = CategoryModel(description="Bebidas")
    db.add_all([food, drinks])
    db.flush()

    items = {
        "burger": ItemModel(description="X-Burguer", unit_price=Decimal("15.90"), category_id=food.id),
        "pizza": ItemModel(description="Pizza Brotinho", unit_price=Decimal("14.00"), category_id=food.id),
        "soda": ItemModel(description="Refrigerante Lata", unit_price=Decimal("6.50"), category_id=drinks.id),
    }
    db.add_all(items.values())
    db.commit()

    return {"food": food, "drinks": drinks, **items}
