from __future__ import annotations

from typing import Any, Dict


def render_text(report: Dict[str, Any]) -> str:
    overview = report.get("overview", {})
    highlights = report.get("highlights", {})
    records = highlights.get("records", {})
    recent = report.get("recent_averages", [])
    lanes = report.get("lucky_lanes", [])
    comebacks = report.get("comebacks", [])
    near = report.get("near_misses", {}).get("counts", {})

    lines = []
    lines.append("LEAGUE DASHBOARD")
    lines.append(
        f"Games: {overview.get('total_games', 0)} | Days: {overview.get('total_game_days', 0)} | "
        f"Members: {overview.get('total_members', 0)} | Avg: {overview.get('average_score', 0):.1f}"
    )
    if overview.get("highest_score"):
        lines.append(
            f"High game: {overview['highest_score']} by {overview.get('highest_score_member')} "
            f"on {overview.get('highest_score_date')}"
        )
    lines.append("")

    lines.append("Recent Averages")
    for row in recent[:10]:
        trend = row.get("trend") or "-"
        pct = row.get("trend_percentage")
        pct_text = f" ({pct:+.1f}%)" if pct is not None else ""
        lines.append(
            f"- {row['member']['name']}: {row.get('recent_average', 0):.1f} over "
            f"{row.get('recent_games', 0)} games | {trend}{pct_text}"
        )
    lines.append("")

    lines.append("Records")
    single = records.get("highest_single_game")
    if single:
        lines.append(f"- High game: {single['score']} ({single['member']}, {single['date']})")
    best_avg = records.get("highest_average")
    if best_avg:
        lines.append(f"- High average: {best_avg['average']:.1f} ({best_avg['member']}, {best_avg['date']})")
    for champ in highlights.get("monthly_champions", []):
        lines.append(
            f"- {champ['month']} champion: {champ['member']['name']} "
            f"{champ['average']:.1f} over {champ['sessions']} sessions"
        )
    lines.append("")

    lines.append("Lucky Lanes")
    for lane in lanes[:5]:
        lines.append(
            f"- Lane {lane['lane_number']}: luck {lane['luck_index']:.1f} ({lane['rating']}) | "
            f"avg {lane['average_score']:.1f} | 200+ {lane['perfect_game_rate']:.1f}%"
        )
    lines.append("")

    lines.append("Comebacks")
    for row in comebacks[:3]:
        lines.append(
            f"- {row['member']['name']} {row['game1_score']} -> {row['game3_score']} "
            f"(+{row['improvement']}) on {row['session_date']}"
        )
    lines.append(
        f"200+: {near.get('hall_of_fame', 0)} | 190s: {near.get('almost_there', 0)} | "
        f"180s: {near.get('so_close', 0)}"
    )

    synergy = report.get("synergy")
    if synergy:
        lines.append("")
        lines.append(f"Synergy for {synergy['member_id']}")
        for row in synergy.get("partners", []):
            lines.append(
                f"- with {row['partner_name']}: {row['synergy_score']:.1f} over {row['games_played']} sessions"
            )

    return "\n".join(lines)
