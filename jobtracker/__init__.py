"""Job tracker: bookmark job postings, parse them with an AI assistant, track deadlines."""
