"""Authentication services: token lifecycle, refresh ledger, account signup."""
