"""Developer tooling for checking built outputs."""
