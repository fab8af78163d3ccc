"""Lead intent scoring and outreach synthesis."""
