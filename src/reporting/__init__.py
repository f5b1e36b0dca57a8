# Console reporting (entry point: python -m reporting.run_demo)
from .console import format_report, print_report
