"""Family Health Vault backend."""
