import string

import pytest

from naive_linkguard.config import EngineConfig
from naive_linkguard.models import ScoreResult
from naive_linkguard.signatures import DEFAULT_SUSPICION_THRESHOLD
from naive_linkguard.scoring import HeuristicScorer, score_url

# 62 distinct characters: entropy ~0.9, and it contains readable runs ("abcd").
TOKEN = string.ascii_letters + string.digits


# --- malformed input -------------------------------------------------------


@pytest.mark.parametrize(
    "url", ["", "not a url", "/relative/path", "example.com/no-scheme", "javascript:void(0)"]
)
def test_malformed_urls_score_zero_without_reasons(url):
    result = score_url(url)
    assert result == ScoreResult(score=0, reasons=(), threshold=4)
    assert result.is_suspicious is False


def test_plain_url_scores_zero():
    result = score_url("https://example.com/about")
    assert result.score == 0
    assert result.reasons == ()


# --- individual signals ----------------------------------------------------


def test_redirect_subdomain_exact_token():
    result = score_url("https://click.example.com/")
    assert result.score == 3
    assert result.reasons == ("Redirect subdomain: click",)
    assert result.is_suspicious is False


def test_redirect_subdomain_prefix_token():
    result = score_url("https://trk2.example.com/")
    assert result.score == 3
    assert result.reasons == ("Redirect subdomain: trk2",)


def test_redirect_service_reports_base_domain():
    result = score_url("https://x.list-manage.com/track/click?u=1")
    assert result.score == 5
    assert result.reasons == (
        "Redirect service: list-manage.com",
        "Redirect path pattern: /track/click...",
    )
    assert result.is_suspicious is True


def test_redirect_path_pattern():
    result = score_url("https://example.com/r/abc")
    assert result.score == 2
    assert result.reasons == ("Redirect path pattern: /r/abc...",)


def test_redirect_path_pattern_is_case_insensitive_and_anchored():
    assert score_url("https://example.com/CLICK/abc").score == 2
    assert score_url("https://example.com/blog/click/abc").score == 0


def test_redirect_path_pattern_first_match_only():
    cfg = EngineConfig.from_mapping(
        {"redirect_path_patterns": [r"^/a/", r"^/a/b/"], "redirect_subdomains": []}
    )
    result = HeuristicScorer(cfg).score("https://example.com/a/b/c")
    assert result.score == 2
    assert len(result.reasons) == 1


def test_obfuscated_token_medium_length():
    url = "https://example.com/" + TOKEN * 2  # path of 125 chars
    result = score_url(url)
    assert result.score == 2
    (reason,) = result.reasons
    assert reason.startswith("Obfuscated token (")
    assert reason.endswith("% entropy, 125 chars)")


def test_obfuscated_token_long_scores_three():
    url = "https://example.com/" + TOKEN * 4  # path of 249 chars
    result = score_url(url)
    assert result.score == 3
    assert result.reasons[0].endswith("249 chars)")


def test_short_high_entropy_path_is_not_obfuscated():
    # 63 chars: below the 80 char gate
    assert score_url("https://example.com/" + TOKEN).score == 0


def test_hex_token_only_loses_readability():
    url = "https://example.com/" + "9f8a7b6c5d4e3f2a1b0c" * 5
    result = score_url(url)
    assert result.score == 1
    assert result.reasons == ("No readable words in path",)


def test_legitimate_pattern_credit():
    result = score_url("https://shop.example.com/order/confirmation/A1B2C3")
    assert result.score == -2
    assert result.reasons == ("Matches legitimate pattern (order/ticket/etc)",)


@pytest.mark.parametrize(
    "path",
    ["/invoice-id/77", "/receipt/2024", "/booking_number/9", "/my-account/settings", "/MyOrders"],
)
def test_legitimate_pattern_variants(path):
    assert score_url("https://example.com" + path).score == -2


# --- combinations ----------------------------------------------------------


def test_signals_are_additive_and_ordered():
    result = score_url("https://click.sendgrid.net/r/xyz")
    assert result.score == 8
    assert result.reasons == (
        "Redirect subdomain: click",
        "Redirect service: sendgrid.net",
        "Redirect path pattern: /r/xyz...",
    )


def test_legitimate_credit_offsets_redirect_signals():
    result = score_url("https://click.example.com/order/12345")
    assert result.score == 1
    assert result.reasons[-1] == "Matches legitimate pattern (order/ticket/etc)"


def test_high_entropy_tracking_scenario():
    url = "https://t.example.com/e/9f8a7b6c5d4e3f2a1b0c9d8e7f6a5b4c3d2e1f0a9b8c7d6e5f4a3b2c1d0e9f8a"
    result = score_url(url)
    assert result.score >= 4
    assert result.is_suspicious
    assert result.reasons[0] == "Redirect subdomain: t"


@pytest.mark.parametrize(
    "plain, with_service",
    [
        ("https://a.example.com/p", "https://a.sendgrid.net.example.com/p"),
        ("https://www.shop.com/order/1", "https://www.mailchimp.com.shop.com/order/1"),
        ("https://go.example.org/r/x", "https://go.hubspotlinks.com.example.org/r/x"),
    ],
)
def test_adding_redirect_service_never_decreases_score(plain, with_service):
    assert score_url(with_service).score >= score_url(plain).score


# --- configuration ---------------------------------------------------------


def test_threshold_is_configurable():
    scorer = HeuristicScorer(EngineConfig(suspicion_threshold=3))
    result = scorer.score("https://click.example.com/")
    assert result.threshold == 3
    assert result.is_suspicious is True


def test_weights_are_configurable():
    cfg = EngineConfig.from_mapping({"weights": {"redirect_subdomain": 10}})
    assert HeuristicScorer(cfg).score("https://click.example.com/").score == 10


def test_extra_redirect_subdomains_extend_defaults():
    cfg = EngineConfig.from_mapping({"extra_redirect_subdomains": ["promo"]})
    scorer = HeuristicScorer(cfg)
    assert scorer.score("https://promo.example.com/").reasons == (
        "Redirect subdomain: promo",
    )
    # the built-in list is still there
    assert scorer.score("https://click.example.com/").score == 3


def test_score_result_defaults_to_built_in_threshold():
    assert ScoreResult().threshold == DEFAULT_SUSPICION_THRESHOLD
    assert ScoreResult(score=DEFAULT_SUSPICION_THRESHOLD).is_suspicious is True
