"""HTTP API over the scoring and outreach core."""
