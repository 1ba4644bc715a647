import unittest
from unittest.mock import patch

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from pos_api.core.errors import (
    CheckoutValidationError,
    InsufficientStockError,
    ProductNotFoundError,
    TransactionNotFoundError,
)
from pos_api.database.base import Base
from pos_api.database.engine import build_engine
from pos_api.models.product import Product
from pos_api.models.transaction import Transaction, TransactionDetail
from pos_api.schemas.transaction import CheckoutItem
from pos_api.services import checkout_service
from pos_api.services.checkout_service import create_transaction, get_transaction


class CheckoutServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self.db = self.Session()

        self.coffee = Product(name="Coffee", price=1000, stock=5)
        self.tea = Product(name="Tea", price=500, stock=10)
        self.cake = Product(name="Cake", price=1500, stock=3)
        self.db.add_all([self.coffee, self.tea, self.cake])
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _stock(self, product_id):
        return self.db.execute(select(Product.stock).where(Product.id == product_id)).scalar_one()

    def _count(self, model):
        return self.db.execute(select(func.count()).select_from(model)).scalar_one()

    def test_single_item_decrements_stock_and_records_detail(self):
        transaction = create_transaction(
            self.db, [CheckoutItem(product_id=self.coffee.id, quantity=3)]
        )

        self.assertEqual(self._stock(self.coffee.id), 2)
        self.assertEqual(transaction.total_amount, 3000)
        self.assertEqual(len(transaction.details), 1)
        detail = transaction.details[0]
        self.assertEqual(detail.transaction_id, transaction.id)
        self.assertEqual(detail.product_name, "Coffee")
        self.assertEqual(detail.quantity, 3)
        self.assertEqual(detail.subtotal, 3000)
        self.assertIsNotNone(transaction.created_at)

    def test_two_items_sum_into_total(self):
        transaction = create_transaction(
            self.db,
            [
                CheckoutItem(product_id=self.tea.id, quantity=2),
                CheckoutItem(product_id=self.cake.id, quantity=1),
            ],
        )

        self.assertEqual(transaction.total_amount, 2500)
        self.assertEqual(
            [(d.product_id, d.subtotal) for d in transaction.details],
            [(self.tea.id, 1000), (self.cake.id, 1500)],
        )
        self.assertEqual(self._count(TransactionDetail), 2)

    def test_total_matches_sum_of_subtotals(self):
        transaction = create_transaction(
            self.db,
            [
                CheckoutItem(product_id=self.cake.id, quantity=3),
                CheckoutItem(product_id=self.coffee.id, quantity=1),
                CheckoutItem(product_id=self.tea.id, quantity=7),
            ],
        )
        stored = get_transaction(self.db, transaction.id)
        self.assertEqual(stored.total_amount, sum(d.subtotal for d in stored.details))
        self.assertEqual(stored.total_amount, 4500 + 1000 + 3500)

    def test_insufficient_stock_changes_nothing(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            create_transaction(self.db, [CheckoutItem(product_id=self.coffee.id, quantity=6)])

        self.assertEqual(ctx.exception.product_id, self.coffee.id)
        self.assertEqual(ctx.exception.available, 5)
        self.assertEqual(self._stock(self.coffee.id), 5)
        self.assertEqual(self._count(Transaction), 0)

    def test_unknown_product_rolls_back_earlier_items(self):
        with self.assertRaises(ProductNotFoundError):
            create_transaction(
                self.db,
                [
                    CheckoutItem(product_id=self.coffee.id, quantity=2),
                    CheckoutItem(product_id=9999, quantity=1),
                ],
            )

        self.assertEqual(self._stock(self.coffee.id), 5)
        self.assertEqual(self._count(Transaction), 0)
        self.assertEqual(self._count(TransactionDetail), 0)

    def test_empty_items_rejected(self):
        with self.assertRaises(CheckoutValidationError):
            create_transaction(self.db, [])
        self.assertEqual(self._count(Transaction), 0)

    def test_non_positive_quantity_rejected_after_valid_item(self):
        for quantity in (0, -1):
            with self.subTest(quantity=quantity):
                with self.assertRaises(CheckoutValidationError):
                    create_transaction(
                        self.db,
                        [
                            CheckoutItem(product_id=self.tea.id, quantity=4),
                            CheckoutItem(product_id=self.cake.id, quantity=quantity),
                        ],
                    )
                self.assertEqual(self._stock(self.tea.id), 10)
                self.assertEqual(self._count(Transaction), 0)

    def test_duplicate_product_lines_share_remaining_stock(self):
        transaction = create_transaction(
            self.db,
            [
                CheckoutItem(product_id=self.coffee.id, quantity=3),
                CheckoutItem(product_id=self.coffee.id, quantity=2),
            ],
        )
        self.assertEqual(transaction.total_amount, 5000)
        self.assertEqual(self._stock(self.coffee.id), 0)

    def test_duplicate_product_lines_exceeding_stock_fail(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            create_transaction(
                self.db,
                [
                    CheckoutItem(product_id=self.cake.id, quantity=2),
                    CheckoutItem(product_id=self.cake.id, quantity=2),
                ],
            )
        self.assertEqual(ctx.exception.available, 1)
        self.assertEqual(self._stock(self.cake.id), 3)
        self.assertEqual(self._count(Transaction), 0)

    def test_later_price_and_name_changes_keep_history(self):
        transaction = create_transaction(
            self.db, [CheckoutItem(product_id=self.tea.id, quantity=2)]
        )

        product = self.db.get(Product, self.tea.id)
        product.price = 9999
        product.name = "Green Tea"
        self.db.commit()
        self.db.expire_all()

        stored = get_transaction(self.db, transaction.id)
        self.assertEqual(stored.total_amount, 1000)
        self.assertEqual(stored.details[0].subtotal, 1000)
        self.assertEqual(stored.details[0].product_name, "Tea")

    def _fail_on_second_decrement(self, error):
        real_decrement = checkout_service._decrement_stock
        calls = []

        def decrement(db, product_id, quantity):
            calls.append(product_id)
            if len(calls) == 2:
                raise error
            return real_decrement(db, product_id, quantity)

        return decrement

    def test_failure_after_first_decrement_rolls_back(self):
        errors = [
            OperationalError("UPDATE products", {}, Exception("disk I/O error")),
            OverflowError("Python int too large to convert to SQLite INTEGER"),
        ]
        for error in errors:
            with self.subTest(error=type(error).__name__):
                side_effect = self._fail_on_second_decrement(error)
                with patch.object(checkout_service, "_decrement_stock", side_effect=side_effect):
                    with self.assertRaises(type(error)):
                        create_transaction(
                            self.db,
                            [
                                CheckoutItem(product_id=self.coffee.id, quantity=2),
                                CheckoutItem(product_id=self.tea.id, quantity=1),
                            ],
                        )

                self.assertFalse(self.db.in_transaction())
                self.assertEqual(self._stock(self.coffee.id), 5)
                self.assertEqual(self._stock(self.tea.id), 10)
                self.assertEqual(self._count(Transaction), 0)
                self.assertEqual(self._count(TransactionDetail), 0)

    def test_unbindable_product_id_leaves_no_partial_decrement(self):
        oversized = CheckoutItem.model_construct(product_id=2**70, quantity=1)
        with self.assertRaises(Exception):
            create_transaction(
                self.db,
                [CheckoutItem(product_id=self.coffee.id, quantity=2), oversized],
            )

        self.assertFalse(self.db.in_transaction())
        self.db.commit()
        self.assertEqual(self._stock(self.coffee.id), 5)
        self.assertEqual(self._count(Transaction), 0)

    def test_get_transaction_missing(self):
        with self.assertRaises(TransactionNotFoundError):
            get_transaction(self.db, 42)


if __name__ == "__main__":
    unittest.main()
