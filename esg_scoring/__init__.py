"""ESG scoring: weighted category scores, rule-based risk, trend forecasts and materiality."""

__version__ = "0.1.0"
