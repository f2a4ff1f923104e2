"""Survey of current institutional affiliations from the ORCID registry."""

__version__ = "0.1.0"
