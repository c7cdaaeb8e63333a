"""HTTP API over the calculator and the scenario catalog."""
