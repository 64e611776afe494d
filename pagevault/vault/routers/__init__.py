"""HTTP routers for the vault API."""
