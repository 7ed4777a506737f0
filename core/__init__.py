"""
Core processing modules for the partnership ledger analyzer.

This package contains:
- aggregate: Row classification and per-category totals
- columns: Header to field mapping
- config: Application configuration and settings
- exceptions: Custom exception classes
- exporters: Excel export functionality
- formatting: Currency and size formatting for reports
- logger: Logging configuration
- normalize: Amount and party label normalization
- parsing: CSV reading
- recency: Latest transaction tracking
- schema: Pydantic models for transactions and results
- settlement: Settlement between the two partners
"""
