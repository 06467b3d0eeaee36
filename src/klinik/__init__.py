"""Klinik: data-access handlers for a clinic/pharmacy back office."""

__version__ = "0.1.0"
