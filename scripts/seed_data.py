import argparse

from sqlalchemy import delete, select

from pos_api.core.logging import setup_logging
from pos_api.database import Base, SessionLocal, engine, ensure_sqlite_schema
from pos_api.models.category import Category
from pos_api.models.product import Product
from pos_api.models.transaction import Transaction, TransactionDetail


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample catalogue data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data (including sales history) before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema()

    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(TransactionDetail))
            db.execute(delete(Transaction))
            db.execute(delete(Product))
            db.execute(delete(Category))
            db.commit()

        has_product = db.execute(select(Product.id).limit(1)).first()
        if has_product:
            print("Seed skipped: products already exist.")
            return

        drinks = Category(name="Drinks", description="Bottled and canned drinks")
        snacks = Category(name="Snacks", description="Packaged snacks")
        db.add_all([drinks, snacks])
        db.flush()

        db.add_all(
            [
                Product(name="Mineral Water 600ml", price=3500, stock=120, category=drinks),
                Product(name="Iced Tea 350ml", price=5000, stock=80, category=drinks),
                Product(name="Potato Chips 68g", price=9500, stock=40, category=snacks),
                Product(name="Chocolate Wafer", price=2500, stock=60, category=snacks),
                Product(name="Plastic Bag", price=200, stock=500),
            ]
        )
        db.commit()
        print("Seed data created.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
