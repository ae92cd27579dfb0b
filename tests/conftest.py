"""Shared test fixtures for all test groups."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ea_discovery.core.config import Settings
from ea_discovery.schemas.artifacts import ArtifactBundle
from ea_discovery.schemas.discovery import DiscoveryRecord


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env file."""
    values = {"anthropic_api_key": "test-key", "database_url": "sqlite+aiosqlite://"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def discovery() -> DiscoveryRecord:
    return DiscoveryRecord(
        company_name="Acme",
        industry="Manufacturing",
        business_context="Mid-size discrete manufacturer selling through distributors.",
        current_challenges="Disconnected quoting and service processes.",
        strategic_goals="Grow direct sales. Improve service response times.",
        technical_landscape="SAP ECC, Homegrown dealer portal, Excel",
        constraints="Lean IT team",
        timeline="12 months",
        budget="$1-2M",
    )


@pytest.fixture
def bundle_data() -> dict:
    """A complete bundle as the model returns it (camelCase)."""
    return {
        "capabilityMap": {
            "businessDrivers": ["Grow direct revenue", "Reduce cost to serve"],
            "sales": [
                {"capability": "Lead Management", "description": "Capture leads", "salesforceProducts": ["Sales Cloud"]}
            ],
            "service": [
                {"capability": "Case Management", "description": "Cases", "salesforceProducts": ["Service Cloud"]}
            ],
            "marketing": [],
            "commerce": [],
            "platformData": [
                {
                    "capability": "Data Integration",
                    "description": "Integrate ERP",
                    "salesforceProducts": ["Data Cloud", "MuleSoft"],
                }
            ],
            "industrySpecific": [],
        },
        "currentStateArchitecture": {
            "overview": "ERP-centric landscape",
            "systemsOfRecord": [
                {
                    "name": "SAP ECC",
                    "businessCapability": "Order Management",
                    "salesforceOpportunity": "Integrate with MuleSoft",
                    "recommendedSalesforceProducts": ["MuleSoft"],
                }
            ],
            "systemsOfDifferentiation": [
                {"name": "Dealer Portal", "businessCapability": "Partner Self-Service"}
            ],
            "systemsOfInnovation": [{"name": "Quote Bot", "emergingCapability": "Guided Selling"}],
        },
        "futureStateArchitecture": {
            "overview": "Unified customer platform",
            "platformComponents": {"dataUnification": "Data Cloud", "integration": "MuleSoft"},
            "systemsOfRecord": [
                {
                    "name": "Sales Cloud",
                    "futureVision": "Unified CRM",
                    "salesforceProducts": ["Sales Cloud"],
                    "timeline": "Q1 2026",
                    "benefits": ["Single view of customer"],
                }
            ],
            "systemsOfDifferentiation": [],
            "systemsOfInnovation": [],
        },
        "prioritizationMatrix": [
            {
                "initiative": "Deploy CRM",
                "businessValue": "High",
                "effort": "Low",
                "roi": "High",
                "priority": 1,
                "description": "Roll out Sales Cloud",
            }
        ],
        "strategicRoadmap": [
            {
                "phase": "Phase 1: Foundation",
                "initiatives": ["Deploy Sales Cloud", "Integrate Data"],
                "outcomes": ["Unified CRM", "Clean data"],
            }
        ],
    }


@pytest.fixture
def bundle(bundle_data) -> ArtifactBundle:
    return ArtifactBundle.model_validate(bundle_data)


@pytest.fixture
def fake_gateway(settings):
    """Gateway stand-in: real settings, AsyncMock ``complete``."""
    gateway = MagicMock()
    gateway.settings = settings
    gateway.complete = AsyncMock(return_value=json.dumps({}))
    return gateway


@pytest.fixture
def settings_factory():
    """Build Settings with per-test overrides (e.g. a tiny upload ceiling)."""
    return make_settings
