import pytest

from tome import slug
from tome.errors import DecodeError, NotFound

TITLES = [
    "Hello World",
    "a/b\\c",
    "100% sure?",
    ".",
    "..",
    "...hidden",
    "Ünïcødé – 漢字 🚀",
    "tabs\tand\nnewlines",
    "%2E",
    "plain-name_with~chars",
]


@pytest.mark.parametrize("title", TITLES)
def test_round_trip(title: str) -> None:
    assert slug.decode(slug.encode(title)) == title


@pytest.mark.parametrize("title", TITLES)
def test_slug_is_path_safe(title: str) -> None:
    encoded = slug.encode(title)
    assert "/" not in encoded
    assert "\\" not in encoded
    assert "." not in encoded
    assert " " not in encoded


def test_encode_examples() -> None:
    assert slug.encode("Hello World") == "Hello%20World"
    assert slug.encode("..") == "%2E%2E"


def test_distinct_titles_give_distinct_slugs() -> None:
    assert len({slug.encode(t) for t in TITLES}) == len(TITLES)


def test_encode_empty_raises() -> None:
    with pytest.raises(ValueError):
        slug.encode("")


@pytest.mark.parametrize(
    "bad",
    ["", "a b", "%zz", "%", "%C3", "%ff", "%41", "%2e", "a.b", "..", "a/b"],
)
def test_decode_rejects_invalid(bad: str) -> None:
    with pytest.raises(DecodeError):
        slug.decode(bad)


def test_decode_error_is_not_found() -> None:
    with pytest.raises(NotFound):
        slug.decode("%zz")
