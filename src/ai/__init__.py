"""AI request orchestration: provider adapters, error taxonomy and the façade."""
