"""
Service layer for business logic.

This package contains the service that runs a transaction export
through column mapping, classification, aggregation and settlement.
"""
