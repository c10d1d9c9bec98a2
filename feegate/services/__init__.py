"""Services for the fee-gated submission flow."""
