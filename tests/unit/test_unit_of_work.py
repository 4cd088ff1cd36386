import pytest

from marketplace.domain.unit_of_work import IUnitOfWork
from marketplace.models.category_model import Category


def test_interface_declares_transaction_methods():
    assert {"commit", "rollback", "flush"} <= IUnitOfWork.__abstractmethods__


def test_flush_assigns_id_before_commit(uow, db_session):
    with uow:
        category = Category(name="Plumbing", slug="plumbing")
        uow.categories.add(category)
        uow.flush()

        assert category.id is not None
        assert uow.categories.get_by_slug("plumbing") is category

    db_session.expire_all()
    assert db_session.get(Category, category.id) is not None


def test_error_rolls_back(uow, db_session):
    with pytest.raises(RuntimeError):
        with uow:
            uow.categories.add(Category(name="Plumbing", slug="plumbing"))
            uow.flush()
            raise RuntimeError("boom")

    assert db_session.query(Category).count() == 0
