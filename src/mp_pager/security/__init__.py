"""Security – sealing of client-held pager state."""
