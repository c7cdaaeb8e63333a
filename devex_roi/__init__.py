"""Developer experience ROI calculator.

- calculator: input validation and the CTS-SW business model pipelines
- scenarios: local scenario catalog, presets and side-by-side comparison
- api: Flask surface over the catalog and the calculator
"""

__version__ = "0.1.0"
