import random
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Segment:
    label: str
    domain: str
    discount: int
    coupon_code: str
    color: str


# Wheel order matters: the widget draws segments clockwise in this order.
SEGMENTS: List[Segment] = [
    Segment("10% OFF Chatbots", "Chatbots", 10, "ZTX-CBOT10", "#2a2a40"),
    Segment("15% OFF Chatbots", "Chatbots", 15, "ZTX-CBOT15", "#3a3a55"),
    Segment("10% OFF Websites", "Websites", 10, "ZTX-WEB10", "#2a2a40"),
    Segment("15% OFF Websites", "Websites", 15, "ZTX-WEB15", "#3a3a55"),
    Segment("10% OFF Apps", "Mobile Apps", 10, "ZTX-MAPP10", "#2a2a40"),
    Segment("15% OFF Apps", "Mobile Apps", 15, "ZTX-MAPP15", "#3a3a55"),
    Segment("10% OFF Custom", "Custom Software", 10, "ZTX-CUST10", "#2a2a40"),
    Segment("15% OFF Custom", "Custom Software", 15, "ZTX-CUST15", "#3a3a55"),
]


def pick_segment(rng: Optional[random.Random] = None) -> Segment:
    """Pick one segment uniformly at random."""
    chooser = rng or random
    return SEGMENTS[chooser.randrange(len(SEGMENTS))]


def find_segment(domain, discount, coupon_code) -> Optional[Segment]:
    """Return the catalog segment matching a claimed reward, or None."""
    try:
        discount = float(discount)
    except (TypeError, ValueError):
        return None
    for segment in SEGMENTS:
        if (
            segment.domain == domain
            and segment.discount == discount
            and segment.coupon_code == coupon_code
        ):
            return segment
    return None
