"""Client ledger: per-client running balances for small businesses."""
