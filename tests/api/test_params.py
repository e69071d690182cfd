import pytest
from pydantic import ValidationError

from carousel.reviews.api.reviews import (
    FetchReviewsParams,
    InvalidReviewsRequestError,
    is_valid_domain,
    parse_params,
)
from carousel.reviews.api.reviews.client import build_query


def test_defaults_and_cache_key():
    params = FetchReviewsParams(domain="example.com")
    assert params.page == 1
    assert params.limit == 20
    assert params.rating is None
    assert params.sort == "latest"
    assert params.cache_key() == "trustpilot:example.com:1:20:all:latest"


def test_cache_key_with_all_parameters():
    params = FetchReviewsParams(
        domain="shop.example.co.uk", page=3, limit=50, rating=4, sort="rating"
    )
    assert params.cache_key() == "trustpilot:shop.example.co.uk:3:50:4:rating"


def test_equivalent_requests_share_a_key():
    a = FetchReviewsParams(domain="  Example.COM ")
    b = FetchReviewsParams(domain="example.com", page=1, limit=20, sort="latest")
    assert a.cache_key() == b.cache_key()


def test_different_requests_have_different_keys():
    keys = {
        FetchReviewsParams(domain="example.com").cache_key(),
        FetchReviewsParams(domain="example.com", page=2).cache_key(),
        FetchReviewsParams(domain="example.com", rating=5).cache_key(),
        FetchReviewsParams(domain="example.com", sort="rating").cache_key(),
        FetchReviewsParams(domain="example.org").cache_key(),
    }
    assert len(keys) == 5


@pytest.mark.parametrize(
    "domain", ["example.com", "a.b.c", "my-shop.io", "localhost", "x1.example"]
)
def test_valid_domains(domain):
    assert is_valid_domain(domain)


@pytest.mark.parametrize(
    "domain",
    ["", "-bad.com", "bad-.com", "exa mple.com", "http://example.com", "a..b", "ex_ample.com"],
)
def test_invalid_domains(domain):
    assert not is_valid_domain(domain)


@pytest.mark.parametrize(
    "overrides",
    [
        {"domain": "bad domain"},
        {"page": 0},
        {"limit": 0},
        {"limit": 101},
        {"rating": 6},
        {"sort": "oldest"},
    ],
)
def test_model_rejects_out_of_range(overrides):
    values = {"domain": "example.com", **overrides}
    with pytest.raises(ValidationError):
        FetchReviewsParams(**values)


def test_parse_params_wraps_validation_errors():
    with pytest.raises(InvalidReviewsRequestError) as exc:
        parse_params(domain="not a domain")
    assert "domain" in str(exc.value)


def test_parse_params_ignores_missing_values():
    params = parse_params(domain="example.com", rating=None, page=None)
    assert params.rating is None
    assert params.page == 1


def test_parse_params_requires_domain():
    with pytest.raises(InvalidReviewsRequestError):
        parse_params(domain=None)


def test_upstream_query_omits_defaults():
    assert build_query(FetchReviewsParams(domain="example.com")) == {
        "domain": "example.com",
        "limit": "20",
        "sort": "latest",
    }
    assert build_query(
        FetchReviewsParams(domain="example.com", page=2, rating=3, sort="rating")
    ) == {
        "domain": "example.com",
        "page": "2",
        "limit": "20",
        "rating": "3",
        "sort": "rating",
    }
