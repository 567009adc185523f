"""SQL Audit report engine — grouping, pagination, diffing and export of scan reports."""

__version__ = "0.1.0"
