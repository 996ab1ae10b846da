"""Static reference data: the habitat wheel and the trait catalog.

The wheel resolves a settled angle to a position in ``ENVIRONMENTS``, so the
order of that tuple is part of the game's behavior and must stay stable.
"""

from __future__ import annotations

from evoroulette.model.environment import Environment
from evoroulette.model.trait import ALL_CATEGORIES, Trait, TraitCategory

ENVIRONMENTS: tuple[Environment, ...] = (
    Environment(
        id="rainforest",
        name="Tropical Rainforest",
        climate="Humid, high rainfall",
        temperature="25°C - 30°C",
        resources="High biodiversity, abundant water",
        challenges="Dense competition, pathogens, low light at floor",
        accent="#10b981",
        bg_gradient="from-green-900 to-black",
    ),
    Environment(
        id="temperate",
        name="Temperate Forest",
        climate="Seasonal, moderate rain",
        temperature="-5°C - 25°C",
        resources="Seasonal nuts, berries, prey",
        challenges="Cold winters, food scarcity in dormancy",
        accent="#059669",
        bg_gradient="from-emerald-900 to-black",
    ),
    Environment(
        id="desert",
        name="Desert",
        climate="Arid, minimal rainfall",
        temperature="10°C - 45°C",
        resources="Scarce water, specialized flora",
        challenges="Dehydration, extreme heat, sandstorms",
        accent="#f59e0b",
        bg_gradient="from-amber-900 to-black",
    ),
    Environment(
        id="savanna",
        name="Savanna",
        climate="Wet and dry seasons",
        temperature="20°C - 30°C",
        resources="Open grasslands, scattered trees",
        challenges="Predation, seasonal drought, fires",
        accent="#fbbf24",
        bg_gradient="from-yellow-900 to-black",
    ),
    Environment(
        id="tundra",
        name="Tundra",
        climate="Cold, windy, low rain",
        temperature="-30°C - 10°C",
        resources="Lichens, mosses, seasonal insects",
        challenges="Permafrost, extreme cold, short growing season",
        accent="#60a5fa",
        bg_gradient="from-blue-900 to-black",
    ),
    Environment(
        id="arctic",
        name="Arctic Ice",
        climate="Polar, frozen",
        temperature="-40°C - 0°C",
        resources="Marine-based food chain",
        challenges="Freezing water, total lack of vegetation",
        accent="#93c5fd",
        bg_gradient="from-sky-900 to-black",
    ),
    Environment(
        id="lake",
        name="Freshwater Lake",
        climate="Aquatic, variable flow",
        temperature="4°C - 20°C",
        resources="Insects, aquatic plants, fish",
        challenges="Oxygen fluctuations, osmotic pressure",
        accent="#2dd4bf",
        bg_gradient="from-teal-900 to-black",
    ),
    Environment(
        id="ocean",
        name="Deep Ocean",
        climate="High pressure, aphotic",
        temperature="2°C - 4°C",
        resources="Marine snow, hydrothermal vents",
        challenges="Crushing pressure, total darkness, cold",
        accent="#1e40af",
        bg_gradient="from-blue-950 to-black",
    ),
    Environment(
        id="coral",
        name="Coral Reef",
        climate="Tropical marine",
        temperature="22°C - 28°C",
        resources="Diverse reef structures, fish",
        challenges="Ocean acidification, high predation",
        accent="#ec4899",
        bg_gradient="from-rose-900 to-black",
    ),
    Environment(
        id="mountain",
        name="Mountain / Alpine",
        climate="Thin air, high UV",
        temperature="-10°C - 15°C",
        resources="Hardy shrubs, minerals",
        challenges="Low oxygen, steep terrain, rocky soil",
        accent="#94a3b8",
        bg_gradient="from-slate-800 to-black",
    ),
)


def _traits(
    category: TraitCategory, start_id: int, rows: list[tuple[str, str, str]]
) -> list[Trait]:
    return [
        Trait(id=start_id + offset, name=name, description=desc, category=category, icon=icon)
        for offset, (name, desc, icon) in enumerate(rows)
    ]


TRAITS: tuple[Trait, ...] = (
    *_traits(
        TraitCategory.PHYSICAL,
        1,
        [
            ("Thick fur", "Insulates against freezing temperatures.", "fa-paw"),
            ("Thin fur", "Allows heat to escape in warm climates.", "fa-wind"),
            ("Scales", "Provides armor and prevents water loss.", "fa-shield-halved"),
            ("Feathers", "Enables flight and complex insulation.", "fa-feather"),
            ("Camouflage coloration", "Blending into the environment to hide.", "fa-eye-slash"),
            ("Bright warning coloration", "Signals toxicity to predators.", "fa-palette"),
            (
                "Large body size",
                "Deters predators and retains heat.",
                "fa-up-right-and-down-left-from-center",
            ),
            (
                "Small body size",
                "Requires less food and allows hiding.",
                "fa-down-left-and-up-right-to-center",
            ),
            ("Long limbs", "Increases stride and aids heat loss.", "fa-arrows-left-right"),
            ("Short limbs", "Conserves heat and aids burrowing.", "fa-compress"),
            ("Webbed feet", "Increases swimming efficiency.", "fa-water"),
            ("Sharp claws", "Tools for digging, climbing, or killing.", "fa-hand-back-fist"),
            ("Hooves", "Durable structures for running on hard ground.", "fa-shoe-prints"),
            ("Streamlined body", "Reduces drag in water or air.", "fa-person-swimming"),
            ("Spines or quills", "Passive defense against attackers.", "fa-braille"),
        ],
    ),
    *_traits(
        TraitCategory.PHYSIOLOGICAL,
        16,
        [
            (
                "Cold-blooded metabolism",
                "Saves energy but requires external heat.",
                "fa-temperature-low",
            ),
            (
                "Warm-blooded metabolism",
                "Active in all temps but high energy cost.",
                "fa-temperature-high",
            ),
            ("Fat storage (blubber)", "Long-term energy and insulation.", "fa-layer-group"),
            (
                "Water retention ability",
                "Surviving long periods without drinking.",
                "fa-droplet-slash",
            ),
            ("Salt excretion glands", "Drinking saltwater without dehydration.", "fa-vial"),
            ("Efficient lungs", "Maximizes oxygen intake from air.", "fa-lungs"),
            ("Oxygen-binding blood", "Survival in low-oxygen high altitudes.", "fa-heart"),
            ("Antifreeze proteins", "Prevents blood from freezing in subzero.", "fa-snowflake"),
            ("Heat-resistant enzymes", "Proteins function at extreme temperatures.", "fa-fire"),
            ("Slow metabolism", "Surviving on very little food intake.", "fa-battery-half"),
        ],
    ),
    *_traits(
        TraitCategory.BEHAVIORAL,
        26,
        [
            ("Nocturnal behavior", "Active at night to avoid heat or predators.", "fa-moon"),
            ("Diurnal behavior", "Active during the day.", "fa-sun"),
            ("Burrowing behavior", "Hiding underground from elements.", "fa-trowel"),
            ("Tree-climbing behavior", "Utilizing the canopy for food/safety.", "fa-tree"),
            ("Migratory behavior", "Traveling to find better resources.", "fa-route"),
            (
                "Territorial behavior",
                "Defending area for exclusive resources.",
                "fa-map-location",
            ),
            ("Pack / social behavior", "Cooperating for hunting and defense.", "fa-users"),
            ("Solitary behavior", "Minimizing competition with others.", "fa-user"),
            ("Tool use", "Manipulating objects to solve problems.", "fa-wrench"),
            ("Ambush hunting", "Conserving energy until prey is close.", "fa-ghost"),
        ],
    ),
    *_traits(
        TraitCategory.FEEDING,
        36,
        [
            ("Carnivorous diet", "Eating other animals for energy.", "fa-bone"),
            ("Herbivorous diet", "Consuming plant matter.", "fa-leaf"),
            ("Omnivorous diet", "Flexible diet of plants and animals.", "fa-utensils"),
            ("Filter feeding", "Straining tiny organisms from water.", "fa-filter"),
            ("Scavenging behavior", "Eating remains left by others.", "fa-skull"),
            ("Long digestive tract", "Breaks down tough fibrous plants.", "fa-link"),
            ("Specialized teeth", "Evolved for specific food sources.", "fa-teeth"),
            ("Venom production", "Chemical attack to subdue prey.", "fa-vial-circle-check"),
            ("Toxin resistance", "Eating poisonous plants or animals safely.", "fa-biohazard"),
            ("Fast sprint speed", "Burst of speed for chase or escape.", "fa-bolt"),
        ],
    ),
    *_traits(
        TraitCategory.REPRODUCTIVE,
        46,
        [
            ("High reproductive rate", "Producing many offspring rapidly.", "fa-users-rectangle"),
            ("Low reproductive rate", "Fewer offspring but high parental care.", "fa-baby"),
            ("Seasonal breeding", "Reproduction timed with resource peaks.", "fa-calendar"),
            ("Rapid mutation rate", "Faster adaptation over generations.", "fa-dna"),
            (
                "Long lifespan",
                "Allows for learning and many breeding cycles.",
                "fa-hourglass-end",
            ),
        ],
    ),
)

_ENVIRONMENTS_BY_ID = {env.id: env for env in ENVIRONMENTS}
_TRAITS_BY_ID = {trait.id: trait for trait in TRAITS}


def get_environment(env_id: str) -> Environment | None:
    """Look up a catalog environment by id."""
    return _ENVIRONMENTS_BY_ID.get(env_id)


def get_trait(trait_id: int) -> Trait | None:
    """Look up a catalog trait by id."""
    return _TRAITS_BY_ID.get(trait_id)


def traits_in_category(
    category: str, catalog: tuple[Trait, ...] | list[Trait] = TRAITS
) -> list[Trait]:
    """Return catalog traits for a category filter, or all of them for "All"."""
    if category == ALL_CATEGORIES:
        return list(catalog)
    return [trait for trait in catalog if trait.category == category]
