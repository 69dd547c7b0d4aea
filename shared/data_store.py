"""
JSON-backed order store for the purchase confirmation notifier.

This module provides a simple data access layer that reads from JSON fixture files.
In production the order rows live in the marketplace database; the notifier
only needs read access to them.

Design decisions:
- Read-only: the notifier never mutates orders
- In-memory caches loaded lazily, one file per table
- `find_order_with_relations` returns every row a confirmation needs in
  one call, so both channels render from the same snapshot
"""

import json
from pathlib import Path
from typing import NamedTuple, Optional

from shared.models import (
    BillingProfile,
    Currency,
    Customer,
    LinkedAccount,
    Order,
)


class OrderWithRelations(NamedTuple):
    """An order plus the related rows loaded alongside it."""
    order: Order
    customer: Optional[Customer]
    currency: Optional[Currency]
    billing_profile: Optional[BillingProfile]
    linked_account: Optional[LinkedAccount]


class DataStore:
    """
    Central data store that loads and manages JSON fixtures.

    Tables: orders (items embedded), customers, currencies,
    billing profiles and linked accounts.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the data store.

        Args:
            data_dir: Path to the data directory containing JSON fixtures.
                     Defaults to ./data relative to project root.
        """
        if data_dir is None:
            data_dir = Path(__file__).parent.parent / "data"

        self.data_dir = Path(data_dir)

        # In-memory caches - loaded lazily
        self._orders: Optional[dict[int, Order]] = None
        self._customers: Optional[dict[int, Customer]] = None
        self._currencies: Optional[dict[int, Currency]] = None
        self._billing_profiles: Optional[dict[int, BillingProfile]] = None
        self._linked_accounts: Optional[dict[int, LinkedAccount]] = None

    # =========================================================================
    # Data Loading (lazy)
    # =========================================================================

    def _load_json(self, filename: str) -> list[dict]:
        """Load a JSON fixture file."""
        filepath = self.data_dir / filename
        if not filepath.exists():
            return []
        with open(filepath, "r") as f:
            return json.load(f)

    def _ensure_orders_loaded(self):
        if self._orders is None:
            data = self._load_json("orders.json")
            self._orders = {o["id"]: Order(**o) for o in data}

    def _ensure_customers_loaded(self):
        if self._customers is None:
            data = self._load_json("customers.json")
            self._customers = {c["id"]: Customer(**c) for c in data}

    def _ensure_currencies_loaded(self):
        if self._currencies is None:
            data = self._load_json("currencies.json")
            self._currencies = {c["id"]: Currency(**c) for c in data}

    def _ensure_billing_profiles_loaded(self):
        if self._billing_profiles is None:
            data = self._load_json("billing_profiles.json")
            self._billing_profiles = {b["id"]: BillingProfile(**b) for b in data}

    def _ensure_linked_accounts_loaded(self):
        if self._linked_accounts is None:
            data = self._load_json("linked_accounts.json")
            self._linked_accounts = {a["id"]: LinkedAccount(**a) for a in data}

    # =========================================================================
    # Order Operations
    # =========================================================================

    def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order by ID."""
        self._ensure_orders_loaded()
        return self._orders.get(order_id)

    def get_orders(self) -> list[Order]:
        """Get all orders."""
        self._ensure_orders_loaded()
        return list(self._orders.values())

    def find_order_with_relations(self, order_id: int) -> Optional[OrderWithRelations]:
        """
        Load an order together with customer, currency, billing profile and
        linked account.

        Returns None when the order does not exist. Missing optional
        relations come back as None.
        """
        order = self.get_order(order_id)
        if order is None:
            return None

        return OrderWithRelations(
            order=order,
            customer=self.get_customer(order.customer_id),
            currency=self.get_currency(order.currency_id) if order.currency_id else None,
            billing_profile=(
                self.get_billing_profile(order.billing_profile_id)
                if order.billing_profile_id else None
            ),
            linked_account=(
                self.get_linked_account(order.linked_account_id)
                if order.linked_account_id else None
            ),
        )

    def get_latest_paid_order(self) -> Optional[Order]:
        """
        Get the most recently created order that has been paid.

        Used to pick a dispatch input for manual testing.
        """
        paid = [o for o in self.get_orders() if o.is_paid()]
        if not paid:
            return None
        return max(paid, key=lambda o: o.created_at)

    # =========================================================================
    # Related Rows
    # =========================================================================

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        self._ensure_customers_loaded()
        return self._customers.get(customer_id)

    def get_currency(self, currency_id: int) -> Optional[Currency]:
        self._ensure_currencies_loaded()
        return self._currencies.get(currency_id)

    def get_billing_profile(self, profile_id: int) -> Optional[BillingProfile]:
        self._ensure_billing_profiles_loaded()
        return self._billing_profiles.get(profile_id)

    def get_linked_account(self, account_id: int) -> Optional[LinkedAccount]:
        self._ensure_linked_accounts_loaded()
        return self._linked_accounts.get(account_id)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def reload(self):
        """Force reload all data from JSON files."""
        self._orders = None
        self._customers = None
        self._currencies = None
        self._billing_profiles = None
        self._linked_accounts = None


# Module-level singleton for convenience
# In tests, create a new DataStore instance with test fixtures
_default_store: Optional[DataStore] = None


def get_data_store(data_dir: Optional[Path] = None) -> DataStore:
    """Get the default data store singleton."""
    global _default_store
    if _default_store is None:
        _default_store = DataStore(data_dir=data_dir)
    return _default_store
