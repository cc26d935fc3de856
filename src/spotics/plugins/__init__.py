"""Provider plugins: one module per remote service."""
