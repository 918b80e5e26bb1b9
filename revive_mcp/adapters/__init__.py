"""Ad server adapters."""
