"""Account update indexer."""
