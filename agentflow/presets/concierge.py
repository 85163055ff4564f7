"""
Travel concierge preset.

The full route -> research -> refine flow:
- FLIGHT and HOTEL requests go straight to a specialist
- ITINERARY requests fan out to flight and hotel researchers, combine
  their findings into a travel package, then refine it through a
  planner -> executor -> reviewer pipeline
- everything else falls back to the GENERAL concierge

Flight and hotel inventory is simulated and embedded in the specialist
instructions.
"""

from enum import Enum

from agentflow.graph.config import CapstoneConfig, CategoryPlan
from agentflow.graph.schemas import BranchKind
from agentflow.router.prompts import build_classifier_instruction
from agentflow.router.schemas import RouterConfig
from agentflow.shared.contracts.roles import AgentRole, RoleRegistry
from agentflow.workflow.schemas import WorkflowStep


class ConciergeCategory(str, Enum):
    FLIGHT = "FLIGHT"
    HOTEL = "HOTEL"
    ITINERARY = "ITINERARY"
    GENERAL = "GENERAL"


CONCIERGE_DESCRIPTIONS = {
    ConciergeCategory.FLIGHT: "Finding or comparing flights to a destination.",
    ConciergeCategory.HOTEL: "Finding or comparing hotels or rooms in a city.",
    ConciergeCategory.ITINERARY: "Planning a trip or multi-day itinerary that needs both travel and stay.",
    ConciergeCategory.GENERAL: "Anything else.",
}

FLIGHT_INVENTORY = """Available flights (any destination the traveler names):
1. SkyHigh Airways: $450 (Non-stop, 8h 30m)
2. OceanBlue Air: $890 (1-stop, 12h 15m)
3. Global Jet: $1,200 (Business Class, 7h 45m)"""

HOTEL_INVENTORY = """Available hotels (any city the traveler names):
1. Grand Plaza: $200/night (4.5 stars)
2. Riverside Boutique: $350/night (5.0 stars)
3. Cozy Corner Inn: $95/night (3.0 stars)"""


CONCIERGE_ROLES = RoleRegistry(
    [
        AgentRole(
            name="concierge_classifier",
            instruction=build_classifier_instruction(ConciergeCategory, CONCIERGE_DESCRIPTIONS),
            temperature=0.0,
        ),
        AgentRole(
            name="flight_specialist",
            instruction=(
                "You are a flight booking specialist for Globetrotter AI. Recommend flights "
                "for the traveler's request using only the options below, with price and "
                f"duration.\n\n{FLIGHT_INVENTORY}"
            ),
            temperature=0.3,
        ),
        AgentRole(
            name="hotel_specialist",
            instruction=(
                "You are a hotel booking specialist for Globetrotter AI. Recommend hotels "
                "for the traveler's request using only the options below, with rating and "
                f"price per night.\n\n{HOTEL_INVENTORY}"
            ),
            temperature=0.3,
        ),
        AgentRole(
            name="general_concierge",
            instruction=(
                "You are Globetrotter AI, a premium travel concierge. Answer general travel "
                "questions helpfully and concisely."
            ),
            temperature=0.7,
        ),
        AgentRole(
            name="flight_researcher",
            instruction=(
                "You research flights for a planned trip. List the best options for the "
                f"destination in the request.\n\n{FLIGHT_INVENTORY}"
            ),
            temperature=0.2,
        ),
        AgentRole(
            name="hotel_researcher",
            instruction=(
                "You research hotels for a planned trip. List the best options for the "
                f"destination in the request.\n\n{HOTEL_INVENTORY}"
            ),
            temperature=0.2,
        ),
        AgentRole(
            name="travel_package_aggregator",
            instruction=(
                "You assemble travel packages. Combine the flight and hotel findings into "
                "one Travel Package with a recommended flight, a recommended hotel and the "
                "total estimated cost. If a source is marked UNAVAILABLE, say so and "
                "recommend from what is available."
            ),
            temperature=0.3,
        ),
        AgentRole(
            name="itinerary_planner",
            instruction=(
                "You are a travel planner. Create a high-level day-by-day schedule for the "
                "trip (3 days unless the traveler says otherwise)."
            ),
            temperature=0.7,
        ),
        AgentRole(
            name="itinerary_executor",
            instruction=(
                "You are a travel executor. Fill in the schedule with specific flight and "
                "hotel options, times and costs."
            ),
            temperature=0.3,
        ),
        AgentRole(
            name="itinerary_reviewer",
            instruction=(
                "You are a travel reviewer. Check the itinerary for logical errors such as "
                "hotel check-in before flight arrival, overlaps or missing gaps, and return "
                "the corrected final itinerary."
            ),
            temperature=0.0,
        ),
    ]
)


def build_concierge_config(roles: RoleRegistry = CONCIERGE_ROLES) -> CapstoneConfig:
    router = RouterConfig(
        categories=ConciergeCategory,
        default=ConciergeCategory.GENERAL,
        classifier=roles.get("concierge_classifier"),
        dispatch={
            ConciergeCategory.FLIGHT: roles.get("flight_specialist"),
            ConciergeCategory.HOTEL: roles.get("hotel_specialist"),
            ConciergeCategory.GENERAL: roles.get("general_concierge"),
        },
    )
    itinerary = CategoryPlan(
        branch=BranchKind.PARALLEL,
        fan_out={
            "Flights": roles.get("flight_researcher"),
            "Hotels": roles.get("hotel_researcher"),
        },
        aggregator=roles.get("travel_package_aggregator"),
        steps=(
            WorkflowStep(1, roles.get("itinerary_planner"), "Create a high-level schedule"),
            WorkflowStep(2, roles.get("itinerary_executor"), "Fill in specific flight and hotel details"),
            WorkflowStep(3, roles.get("itinerary_reviewer"), "Check for overlaps or missing gaps"),
        ),
    )
    return CapstoneConfig(router=router, plans={ConciergeCategory.ITINERARY: itinerary})
