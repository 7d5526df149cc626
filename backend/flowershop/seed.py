from datetime import timedelta
from sqlalchemy.orm import Session

from flowershop.core.clock import utcnow
from flowershop.core.db import Base, engine, SessionLocal
from flowershop.core.security import hash_password
from flowershop.models.user import User, UserType
from flowershop.models.category import Category
from flowershop.models.product import Product
from flowershop.models.order import Order, OrderStatus

import flowershop.models  # noqa


def reset_db(db: Session):
    # Drops & recreates all tables
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def seed_users(db: Session) -> tuple[User, User]:
    admin = User(
        name="Anna",
        surname="Petrosyan",
        username="admin",
        email="admin@flowershop.example.com",
        password=hash_password("admin123"),
        user_type=UserType.ADMIN,
    )
    customer = User(
        name="Karen",
        surname="Sargsyan",
        username="karen",
        email="karen@flowershop.example.com",
        password=hash_password("karen123"),
        user_type=UserType.USER,
    )
    db.add_all([admin, customer])
    db.flush()
    return admin, customer


def seed_catalog(db: Session, admin: User) -> dict[str, Product]:
    roses = Category(name="Roses")
    tulips = Category(name="Tulips")
    bouquets = Category(name="Bouquets")
    db.add_all([roses, tulips, bouquets])
    db.flush()

    products = [
        Product(
            name="Red Rose",
            description="Single long-stem red rose.",
            price=1500,
            image="red_rose.png",
            category=roses,
            user_id=admin.id,
        ),
        Product(
            name="White Rose",
            description="Single long-stem white rose.",
            price=1400,
            image="white_rose.png",
            category=roses,
            user_id=admin.id,
        ),
        Product(
            name="Yellow Tulip",
            description="Fresh Dutch tulip.",
            price=900,
            image="yellow_tulip.png",
            category=tulips,
            user_id=admin.id,
        ),
        Product(
            name="Spring Bouquet",
            description="Tulips, daffodils and greenery wrapped in kraft paper.",
            price=12000,
            image="spring_bouquet.png",
            category=bouquets,
            user_id=admin.id,
        ),
    ]
    db.add_all(products)
    db.flush()
    return {p.name: p for p in products}


def seed_orders(db: Session, customer: User, products: dict[str, Product]):
    now = utcnow()
    rose = products["Red Rose"]
    bouquet = products["Spring Bouquet"]

    orders = [
        # still editable
        Order(
            user_id=customer.id,
            product_id=rose.id,
            price=rose.price * 5,
            status=OrderStatus.NEW,
            order_date=now - timedelta(minutes=2),
            address="Yerevan, Abovyan 12",
            quantity=5,
        ),
        # past the edit window, waiting for delivery
        Order(
            user_id=customer.id,
            product_id=bouquet.id,
            price=bouquet.price,
            status=OrderStatus.NEW,
            order_date=now - timedelta(minutes=20),
            address="Yerevan, Tumanyan 5",
            quantity=1,
        ),
        Order(
            user_id=customer.id,
            product_id=rose.id,
            price=rose.price * 11,
            status=OrderStatus.DELIVERED,
            order_date=now - timedelta(days=3),
            address="Yerevan, Abovyan 12",
            quantity=11,
        ),
    ]
    db.add_all(orders)


def main():
    db = SessionLocal()
    try:
        reset_db(db)
        admin, customer = seed_users(db)
        products = seed_catalog(db, admin)
        seed_orders(db, customer, products)
        db.commit()

        print("Seed complete.")
        print("Log in with:")
        print("- admin@flowershop.example.com / admin123 (ADMIN)")
        print("- karen@flowershop.example.com / karen123 (USER)")
    finally:
        db.close()


if __name__ == "__main__":
    main()
