"""Identity store adapters."""
