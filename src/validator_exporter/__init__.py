"""Prometheus exporter for Solana validator vote accounts across commitment levels."""
