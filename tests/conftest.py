"""
Pytest configuration and shared test fixtures.

Provides the FastAPI test client, a settings override helper, and sample
line items used across the pricing and order test suites.
"""

from decimal import Decimal
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from laundra.core.config import Settings, get_settings
from laundra.main import app
from laundra.services.pricing import LineItem, OrderModifiers


@pytest.fixture(scope="function")
def test_client() -> Generator[TestClient, None, None]:
    """
    Create a synchronous test client for the FastAPI application.

    Dependency overrides installed during the test are removed afterwards.

    Yields:
        TestClient: Synchronous test client for FastAPI app
    """
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def override_settings() -> Callable[..., Settings]:
    """
    Override application settings for API requests.

    Returns:
        Function that builds Settings from keyword arguments and installs
        them as the get_settings dependency

    Example:
        def test_forward_only(test_client, override_settings):
            override_settings(allow_status_rollback=False)
    """

    def _override(**values) -> Settings:
        settings = Settings(_env_file=None, **values)
        app.dependency_overrides[get_settings] = lambda: settings
        return settings

    return _override


@pytest.fixture
def shirt_item() -> LineItem:
    """Shirt at catalog price with no stain treatment."""
    return LineItem(
        product_reference_price=Decimal("3.50"),
        quantity=2,
        product_id="prod_shirt",
        description="Shirt",
    )


@pytest.fixture
def suit_item_with_stain() -> LineItem:
    """Two-piece suit with a wine stain treatment."""
    return LineItem(
        product_reference_price=Decimal("14.00"),
        stain_surcharge=Decimal("4.50"),
        quantity=1,
        product_id="prod_suit",
        stain_type_id="stain_wine",
        description="Two-piece suit",
        note="Red wine on left lapel",
    )


@pytest.fixture
def standard_modifiers() -> OrderModifiers:
    """Non-express order at 20% VAT with the default express fee configured."""
    return OrderModifiers(
        is_express=False,
        express_fee=Decimal("15.00"),
        vat_rate_percent=Decimal("20"),
    )
