"""Role sync server: keep Discord guild roles in line with a Notion members database."""
