"""Loading portfolio records for the command line."""
