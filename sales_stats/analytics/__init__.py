"""
Running-maximum trackers and the single-pass aggregation driver.
"""
