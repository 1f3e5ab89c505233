"""HTTP API for the workforce payroll engine."""
