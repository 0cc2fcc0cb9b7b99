"""
Pytest Configuration and Shared Fixtures for SCV Decomposition Tests.

This module provides fixtures and configuration for all tests, supporting:
- Small hand-checkable income record sets (pandas DataFrames)
- Record sets with an income split into labour and capital sources
- Settings isolation (the cached settings singleton is cleared per test)
- A FastAPI TestClient for API tests

Dependencies:
- pytest
- pandas
- fastapi / httpx (TestClient)
"""

from typing import Any, Dict, Generator, List

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from scv2d.core.config import Settings, get_settings


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - property: Marks tests checking algebraic properties of the decomposition
    - api: Marks tests going through the HTTP layer

    Usage:
        pytest -m property
        pytest -m "not api"
    """
    config.addinivalue_line(
        'markers',
        'property: marks tests checking algebraic properties of the decomposition'
    )
    config.addinivalue_line(
        'markers',
        'api: marks tests exercising the FastAPI endpoints'
    )


# ============================================================
# SETTINGS FIXTURES
# ============================================================

@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """
    Clear the settings singleton before and after each test so environment
    changes made with monkeypatch never leak between tests.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def default_settings() -> Settings:
    """Settings with all defaults (encounter order, interleaved layout)."""
    return Settings()


@pytest.fixture
def sorted_settings() -> Settings:
    """Settings enumerating groups in ascending order."""
    return Settings(group_order='sorted')


# ============================================================
# RECORD SET FIXTURES
# ============================================================

@pytest.fixture
def two_person_frame() -> pd.DataFrame:
    """
    Two records with total income 100 and 200, unit weights.

    Mean 150, population variance 2500, SCV = 2500 / (2 * 150^2) = 1/18.
    """
    return pd.DataFrame({
        'total': [100.0, 200.0],
        'w': [1.0, 1.0],
    })


@pytest.fixture
def income_frame() -> pd.DataFrame:
    """
    Households with total income split into labour and capital income,
    grouped by sex, with unequal population weights.

    Labour + capital equals total on every row. Group 'M' appears first.
    """
    return pd.DataFrame({
        'sex': ['M', 'F', 'M', 'F', 'M', 'F', 'F'],
        'hitotal': [250.0, 100.0, 60.0, 180.0, 400.0, 90.0, 130.0],
        'hilabour': [200.0, 80.0, 60.0, 120.0, 250.0, 90.0, 100.0],
        'hicapital': [50.0, 20.0, 0.0, 60.0, 150.0, 0.0, 30.0],
        'hpopwgt': [2.0, 1.0, 1.0, 1.5, 0.5, 1.0, 3.0],
    })


@pytest.fixture
def homogeneous_means_frame() -> pd.DataFrame:
    """
    Two equally weighted groups whose source means both equal 20.

    Group 'a': [10, 30] (variance 100), group 'b': [20, 20] (variance 0).
    Population mean 20, variance 50, SCV 50 / 800 = 0.0625.
    """
    return pd.DataFrame({
        'region': ['a', 'a', 'b', 'b'],
        'income': [10.0, 30.0, 20.0, 20.0],
    })


@pytest.fixture
def separated_means_frame() -> pd.DataFrame:
    """
    Two equally weighted groups without internal variation.

    Group 'low': [10, 10], group 'high': [30, 30]. Population mean 20,
    variance 100, SCV 100 / 800 = 0.125, all of it between groups.
    """
    return pd.DataFrame({
        'region': ['low', 'low', 'high', 'high'],
        'income': [10.0, 10.0, 30.0, 30.0],
    })


@pytest.fixture
def decomposition_payload() -> Dict[str, Any]:
    """JSON body for POST /decompositions built from a small record set."""
    records: List[Dict[str, Any]] = [
        {'sex': 'F', 'hitotal': 100.0, 'hilabour': 80.0, 'hicapital': 20.0, 'hpopwgt': 1.5},
        {'sex': 'M', 'hitotal': 250.0, 'hilabour': 200.0, 'hicapital': 50.0, 'hpopwgt': 1.0},
        {'sex': 'F', 'hitotal': 180.0, 'hilabour': 120.0, 'hicapital': 60.0, 'hpopwgt': 0.8},
        {'sex': 'M', 'hitotal': 60.0, 'hilabour': 60.0, 'hicapital': 0.0, 'hpopwgt': 2.0},
    ]
    return {
        'records': records,
        'total': 'hitotal',
        'feature': 'sex',
        'sources': ['hilabour', 'hicapital'],
        'weights': 'hpopwgt',
    }


# ============================================================
# API FIXTURES
# ============================================================

@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient with dependency overrides reset afterwards.
    """
    from scv2d.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
