# Role: Renders an ItineraryPlan as the plain-text assistant message (chat API, CLI, Streamlit).

from __future__ import annotations

from typing import List

from trip_assistant.models.itinerary import BUDGET_CATEGORIES, ItineraryPlan
from trip_assistant.utils.money import format_money

_SLOT_ORDER = {"morning": 0, "afternoon": 1, "evening": 2}


def render_plan(plan: ItineraryPlan) -> str:
    def money(amount) -> str:
        return format_money(amount, plan.currency)

    lines: List[str] = []
    route = " -> ".join(plan.cities)
    lines.append(f"Your {len(plan.days)}-day trip to {plan.destination} ({route})")
    lines.append(f"Travelers: {plan.travelers} | Budget: {money(plan.total_budget)}")
    lines.append("")

    lines.append("Budget breakdown:")
    percentages = plan.budget_breakdown.percentages()
    for name in BUDGET_CATEGORIES:
        amount = plan.budget_breakdown.amounts.get(name)
        shown = money(amount) if amount is not None else "-"
        lines.append(f"- {name.capitalize()}: {percentages[name]}% ({shown})")
    lines.append("")

    if plan.flight is not None:
        f = plan.flight
        lines.append(
            f"Flights: {f.airline} {f.departure_airport} -> {f.arrival_airport}, "
            f"{money(f.price_per_person)} pp ({money(f.total_price)} total, return)"
        )
    for stay in plan.stays:
        note = "" if stay.fallback_level == "strict" else f" [{stay.fallback_level.replace('_', ' ')}]"
        lines.append(
            f"Stay in {stay.city}: {stay.name} ({stay.accommodation_class}, {money(stay.price_per_night)}/night){note}"
        )
    lines.append("")

    for day in plan.days:
        lines.append(f"Day {day.day_index} ({day.date.strftime('%a %d %b')}): {day.title}")
        for a in sorted(day.activities, key=lambda x: (_SLOT_ORDER.get(x.time_slot, 3), x.time)):
            cost = f" - {money(a.cost)} pp" if a.cost else ""
            lines.append(f"  {a.time} {a.name}{cost}")
        lines.append(f"  Day cost: {money(day.daily_cost)} | Running total: {money(day.running_total)}")
        lines.append("")

    lines.append(f"Estimated total: {money(plan.total_cost)} of {money(plan.total_budget)}")
    lines.append("Say \"start over\" to plan another trip.")
    return "\n".join(lines)
