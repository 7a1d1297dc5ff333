"""Business logic: analytics engine, calendar, reports and the trade store."""
