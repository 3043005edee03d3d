"""Test suite for the portfolio dashboard backend."""
