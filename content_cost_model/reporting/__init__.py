from .summary import (
    fixed_cost_frame,
    member_cost_frame,
    role_summary_frame,
    save_cost_report,
    totals_frame,
)

__all__ = ["fixed_cost_frame", "member_cost_frame", "role_summary_frame", "save_cost_report", "totals_frame"]
