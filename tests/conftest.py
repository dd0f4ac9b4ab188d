import os

# Precisa vir antes de qualquer import de storebuilder (config é lido no import)
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient

from storebuilder.core import models
from storebuilder.core.database import SessionLocal, engine


# ═══════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════

@pytest.fixture
def test_db():
    """Banco SQLite em memória, recriado a cada teste"""
    models.Base.metadata.create_all(engine)
    db = SessionLocal()
    yield db
    db.close()
    models.Base.metadata.drop_all(engine)


@pytest.fixture
def sample_plan(test_db):
    plan = models.SubscriptionPlan(id=1, name="basic", max_delivery_zones=3)
    test_db.add(plan)
    test_db.commit()
    return plan


@pytest.fixture
def sample_store(test_db):
    """Loja sem nada salvo em delivery_fees"""
    store = models.Store(id=1, name="متجر تجريبي", url_slug="teste", is_active=True)
    test_db.add(store)
    test_db.commit()
    return store


@pytest.fixture
def client(test_db):
    from storebuilder.main import app

    return TestClient(app)
