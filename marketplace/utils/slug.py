import re


_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to one hyphen, strip edge hyphens.

    >>> slugify("Home & Garden Services!!")
    'home-garden-services'
    """
    return _NON_ALNUM_RUN.sub("-", name.lower()).strip("-")
