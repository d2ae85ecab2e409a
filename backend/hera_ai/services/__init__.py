"""Services for the HERA AI router."""
