"""tidyfolds: k-fold resampling and evaluation harness."""

__version__ = "0.1.0"
