"""Portfolio contact relay: validates contact-form submissions and emails them to the site owner."""

__version__ = "0.1.0"
