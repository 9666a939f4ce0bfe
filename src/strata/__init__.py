"""strata — rule-gated widget layers for content-managed page layouts."""

__version__ = "0.1.0"
