"""Playwright fixtures for the demo site E2E tests."""

from __future__ import annotations

import pytest
from faker import Faker
from playwright.sync_api import Page

from artifact_retention.config import load_config
from shared.live_stack import live_site_url
from tests.e2e.pages.contact_page import ContactPage
from tests.e2e.pages.interactive_page import InteractivePage
from tests.e2e.pages.products_page import ProductsPage

fake = Faker()


@pytest.fixture(scope="session")
def live_server(pytestconfig) -> str:
    """Return the URL of a running demo site, or skip the E2E suite."""
    config = load_config(pytestconfig.getoption("artifact_config"))
    return live_site_url(config.base_url, suite_name="E2E")


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args: dict) -> dict:
    return {
        **browser_context_args,
        "viewport": {"width": 1280, "height": 720},
        "ignore_https_errors": True,
    }


@pytest.fixture
def contact_data() -> dict[str, str]:
    """Random but valid contact form data."""
    return {
        "first_name": fake.first_name(),
        "last_name": fake.last_name(),
        "email": fake.email(),
        "message": fake.paragraph(nb_sentences=2),
    }


@pytest.fixture
def contact_page(live_server: str, recorded_page: Page) -> ContactPage:
    contact = ContactPage(recorded_page, live_server)
    contact.navigate()
    return contact


@pytest.fixture
def products_page(live_server: str, recorded_page: Page) -> ProductsPage:
    products = ProductsPage(recorded_page, live_server)
    products.navigate()
    return products


@pytest.fixture
def interactive_page(live_server: str, recorded_page: Page) -> InteractivePage:
    interactive = InteractivePage(recorded_page, live_server)
    interactive.navigate()
    return interactive
