"""The sales tips catalogue and tip-of-the-day selection."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

CATEGORIES = (
    "mindset_preparation",
    "communication_relationship",
    "sales_strategy_tactics",
    "urgency_education",
)


@dataclass(frozen=True)
class SalesTip:
    id: int
    title: str
    content: str
    category: str
    order: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


SALES_TIPS: tuple[SalesTip, ...] = (
    # Mindset & preparation
    SalesTip(1, "Be a construction problem-solver, not a seller",
             "Every customer is building something. Find what they're trying to achieve and guide them.",
             "mindset_preparation", 1),
    SalesTip(2, "Know every product's real-life application",
             "Understand where each item (board, screw, frame, or adhesive) is used. This builds instant trust.",
             "mindset_preparation", 2),
    SalesTip(3, "Memorize pricing tiers and promotions",
             "When clients see confidence, they don't negotiate as hard.",
             "mindset_preparation", 3),
    SalesTip(4, "Start every day with a clear target",
             "Calls, invoices, number of boards sold: set specific daily goals.",
             "mindset_preparation", 4),
    SalesTip(5, "Understand your competitors' weak points",
             "Know where you win on service, delivery speed and flexible deals, and lead with it.",
             "mindset_preparation", 5),
    # Communication & relationship building
    SalesTip(7, "Greet every customer the moment they enter",
             "The first 10 seconds decide if they'll buy or leave.",
             "communication_relationship", 7),
    SalesTip(8, "Ask open questions",
             "What project are you working on? Ceilings or partitions? How many rooms?",
             "communication_relationship", 8),
    SalesTip(9, "Talk solutions, not prices",
             "\"This board won't crack under humidity\" sells better than quoting the price.",
             "communication_relationship", 9),
    SalesTip(10, "Match their language",
             "Speak technically with contractors, simply with homeowners.",
             "communication_relationship", 10),
    SalesTip(11, "Always repeat their needs",
             "Restating the order back to the customer shows attention.",
             "communication_relationship", 11),
    SalesTip(12, "Follow up quotes within 24 hours",
             "Call or message. Clients appreciate responsiveness.",
             "communication_relationship", 12),
    SalesTip(13, "Upsell based on quality",
             "\"This adhesive costs a little more, but it lasts double.\"",
             "communication_relationship", 13),
    # Sales strategy & tactics
    SalesTip(14, "Bundle sales",
             "When selling boards, add screws, tape and jointing compound. Don't let clients buy half the solution.",
             "sales_strategy_tactics", 14),
    SalesTip(16, "Use Good-Better-Best pricing",
             "Offer three options. The middle one sells best.",
             "sales_strategy_tactics", 16),
    SalesTip(17, "Push high-margin items",
             "Screws, adhesives and cornices often add 20-60% profit.",
             "sales_strategy_tactics", 17),
    SalesTip(18, "Offer free delivery or discounts for large quantities",
             "Incentivize volume purchases.",
             "sales_strategy_tactics", 18),
    # Creating urgency & educating
    SalesTip(23, "Create urgency with project timelines",
             "Prices are going up next week: order now and save.",
             "urgency_education", 23),
    SalesTip(24, "Turn problems into opportunities",
             "Handle complaints calmly, then offer a free sample or a discount on the next purchase.",
             "urgency_education", 24),
    SalesTip(29, "Educate your customers",
             "Teach them about acoustic boards, insulation options or fire-rated systems. Build long-term trust.",
             "urgency_education", 29),
    SalesTip(30, "Celebrate project milestones",
             "Congratulate customers on finished jobs to build an emotional connection.",
             "urgency_education", 30),
)


def tip_for_date(day: date) -> SalesTip:
    """Deterministic: the same tip all day, index = day of year mod count."""
    return SALES_TIPS[day.timetuple().tm_yday % len(SALES_TIPS)]


def get_tip(tip_id: int) -> SalesTip | None:
    return next((t for t in SALES_TIPS if t.id == tip_id), None)


def tips_in_category(category: str) -> list[SalesTip]:
    return [t for t in SALES_TIPS if t.category == category]
