"""Testing – in-memory doubles for pager ports."""
