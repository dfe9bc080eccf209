"""Daily summaries and workbook output for scan results."""
