# chat_analyzer/presentation/report_formatter.py
from ..domain.models import AnalysisResult


def format_report(result: AnalysisResult) -> str:
    """Renders an analysis as a plain-text summary for chat replies."""
    report = result.report
    lines = [
        f"Chat activity {report.window.start.isoformat()} to {report.window.end.isoformat()}",
        f"Messages parsed: {result.event_count} from {len(result.senders())} participants",
        "",
        "Date        Active  New",
    ]
    for stat in report.daily_stats:
        lines.append(f"{stat.date.isoformat()}  {stat.active_users:>6}  {stat.new_users:>3}")

    lines.append("")
    if report.power_users:
        lines.append("Power users:")
        for power_user in report.power_users:
            lines.append(f"- {power_user.user}: {power_user.active_days} days")
    else:
        lines.append(f"No power users in the last {len(report.daily_stats)} days.")
    return "\n".join(lines)
