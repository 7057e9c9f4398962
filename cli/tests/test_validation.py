import pytest

from dnsetup_cli.validation import validate_domain, validate_token_format


@pytest.mark.parametrize(
    "domain",
    [
        "dns.example.com",
        "a.io",
        "sub-domain.example.co.uk",
        "xn--80ak6aa92e.com",
        "1.2.3.example.net",
        "A.EXAMPLE.ORG",
    ],
)
def test_validate_domain_accepts(domain: str) -> None:
    assert validate_domain(domain)


@pytest.mark.parametrize(
    "domain",
    [
        "",
        "example",
        "-bad.example.com",
        "bad-.example.com",
        "a..b.com",
        ".example.com",
        "example.com.",
        "example.c",
        "example.123",
        "exa mple.com",
        "under_score.example.com",
        f"{'a' * 64}.com",
    ],
)
def test_validate_domain_rejects(domain: str) -> None:
    assert not validate_domain(domain)


def test_validate_domain_length_boundary() -> None:
    prefix = f"{'a' * 63}." * 3
    at_limit = prefix + "a" * 57 + ".com"
    over_limit = prefix + "a" * 58 + ".com"
    assert len(at_limit) == 253
    assert validate_domain(at_limit)
    assert not validate_domain(over_limit)


def test_validate_token_format_length() -> None:
    assert not validate_token_format("")
    assert not validate_token_format("A" * 39)
    assert not validate_token_format("valid-looking-but-short")
    assert validate_token_format("A" * 40)
    assert validate_token_format("Aq9KZsM0yXHfV3BNe4cWb2tEPLoRrG8iJdYUh1m7F5O6k")


@pytest.mark.parametrize(
    "token",
    [
        "A" * 39 + "’",
        "“" + "A" * 40 + "”",
        "A" * 20 + " " + "A" * 20,
        "A" * 40 + "\t",
        "A" * 40 + "\x00",
    ],
)
def test_validate_token_format_rejects_unsendable_characters(token: str) -> None:
    assert not validate_token_format(token)
