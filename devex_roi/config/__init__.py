"""Environment-backed settings (store location, API guard, logging)."""
