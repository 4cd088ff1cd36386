import pytest

from marketplace.utils.object_id import generate_object_id, is_valid_object_id
from marketplace.utils.slug import slugify


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Home & Garden Services!!", "home-garden-services"),
        ("Plumbing", "plumbing"),
        ("  Deep   Cleaning  ", "deep-cleaning"),
        ("--Pet -- Care--", "pet-care"),
        ("Tutoring 101", "tutoring-101"),
        ("&&", ""),
    ],
)
def test_slugify(name, expected):
    assert slugify(name) == expected


def test_generated_object_ids_are_valid_and_distinct():
    ids = {generate_object_id() for _ in range(100)}

    assert len(ids) == 100
    assert all(is_valid_object_id(i) for i in ids)


@pytest.mark.parametrize("value", ["", "xyz", "0" * 23, "g" * 24, None, 123])
def test_invalid_object_ids(value):
    assert not is_valid_object_id(value)
