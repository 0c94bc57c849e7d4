"""Loading of the Superstore order table into memory."""
