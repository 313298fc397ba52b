import pytest

from .base import make_tenant


@pytest.fixture
def tenant(db):
    company, user, warehouse, factory = make_tenant()
    return {"company": company, "user": user, "warehouse": warehouse, "factory": factory}


@pytest.fixture
def other_tenant(db):
    company, user, warehouse, factory = make_tenant(name="Other Mills", slug="other-mills")
    return {"company": company, "user": user, "warehouse": warehouse, "factory": factory}
