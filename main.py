"""
sales_stats – Main entry point.

Thin bootstrap that forwards to the command-line action:
    python main.py data/sales.csv [data/results]
"""

from actions.compute_sales_maxima import main


if __name__ == "__main__":
    main()
