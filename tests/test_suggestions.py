from rxcost_core.services.suggestions import generate_cost_suggestions, parse_bullets


def test_no_token_means_no_suggestions(monkeypatch):
    monkeypatch.delenv("HF_TOKEN", raising=False)
    tips = generate_cost_suggestions(
        total_monthly_cost=650.0,
        annual_cost=8000.0,
        monthly_installment=666.67,
        affordability_risk=True,
    )
    assert tips == []


def test_parse_bullets_keeps_list_items_only():
    text = "Here are ideas:\n- Ask about a generic\n* Use a 90-day supply\n\n• Check assistance programs\n-\n"
    assert parse_bullets(text) == [
        "Ask about a generic",
        "Use a 90-day supply",
        "Check assistance programs",
    ]
