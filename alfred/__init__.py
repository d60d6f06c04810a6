"""Alfred — Slack channel monitoring configuration backend."""
