"""Pure domain model: invoice numbers, division pricing, rosters and registration rules."""
