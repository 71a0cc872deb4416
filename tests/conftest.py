"""
Shared test fixtures: every test gets its own temporary project root.
"""
import json
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from repricing_tool.config.settings import get_settings, reset_settings
from repricing_tool.api.state import get_state, reset_state


SAMPLE_PRODUCTS = [
    {"sku": "A-100", "name": "Чайник электрический", "stock": 5, "costPrice": 900,
     "currentPrice": 1200, "salesQty": 365, "abcMargin": "A", "marginTotal": 3000,
     "sourceStatus": "Both"},
    {"SKU": "B-200", "Name": "Кружка керамическая", "Stock": 0, "CostPrice": 50,
     "CurrentPrice": 100, "SalesQty": 730, "AbcMargin": "B", "MarginTotal": 500,
     "SourceStatus": "Both"},
    {"sku": "C-300", "name": "Ложка чайная", "stock": 12, "costPrice": 10,
     "currentPrice": 40, "salesQty": 100, "abcMargin": "C"},
    {"sku": "A-101", "name": "Чайник заварочный", "stock": 3, "costPrice": 200,
     "currentPrice": 300, "salesQty": 3650, "abcMargin": "A"},
    {"sku": "N-400", "name": "Salt shaker", "stock": 1, "currentPrice": 2000},
    # rejected rows
    {"sku": "X-1", "name": "Negative stock", "stock": -2, "currentPrice": 10},
    {"sku": "X-2", "name": "Only in ABC", "stock": 4, "sourceStatus": "ABC_Only"},
    {"name": "No sku", "stock": 1},
    {"sku": "X-3", "stock": 1},
]


@pytest.fixture
def project_root(tmp_path, monkeypatch):
    """Point settings and app state at an empty temporary project."""
    monkeypatch.setenv('REPRICING_PROJECT_ROOT', str(tmp_path))
    reset_state()
    reset_settings()
    yield tmp_path
    reset_state()
    reset_settings()


@pytest.fixture
def settings(project_root):
    return get_settings()


@pytest.fixture
def seed_file(project_root):
    path = project_root / 'products_initial.json'
    path.write_text(json.dumps(SAMPLE_PRODUCTS, ensure_ascii=False), encoding='utf-8')
    return path


@pytest.fixture
def state(project_root):
    return get_state()


@pytest.fixture
def seeded_state(state, seed_file):
    state.seeder.seed_products()
    return state


@pytest.fixture
def client(project_root):
    from fastapi.testclient import TestClient
    from repricing_tool.api.main import app

    with TestClient(app) as test_client:
        yield test_client
