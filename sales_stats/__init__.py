"""
sales_stats: single-pass running-maximum statistics over sales line-item CSVs.
"""
