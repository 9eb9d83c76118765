"""Static per-craft tool recommendation catalog."""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from craftguide.schemas.guidance import CraftSpecialization, Priority, SkillLevel, ToolCategory


ALL_SKILL_LEVELS: FrozenSet[SkillLevel] = frozenset(SkillLevel)
APPRENTICE_AND_UP: FrozenSet[SkillLevel] = ALL_SKILL_LEVELS - {SkillLevel.NOVICE}
JOURNEYMAN_AND_UP: FrozenSet[SkillLevel] = APPRENTICE_AND_UP - {SkillLevel.APPRENTICE}


@dataclass(frozen=True)
class CatalogTool:
    """
    A recommendable tool.

    Attributes:
        name: Display name, compared case-insensitively against owned tools
        category: Inventory category
        reason: Why the tool is worth having
        priority: Recommendation priority
        skill_levels: Skill levels the tool is appropriate for
        estimated_cost: Rough price in USD
        alternatives: Substitutes the user may already have
    """
    name: str
    category: ToolCategory
    reason: str
    priority: Priority
    skill_levels: FrozenSet[SkillLevel]
    estimated_cost: Optional[float] = None
    alternatives: Tuple[str, ...] = field(default_factory=tuple)


ToolCatalog = Dict[CraftSpecialization, Tuple[CatalogTool, ...]]


# Every CraftSpecialization has an entry, even when empty
TOOL_CATALOG: ToolCatalog = {
    CraftSpecialization.WOODWORKING: (
        CatalogTool(
            name="Combination Square",
            category=ToolCategory.MEASURING,
            reason="Essential for accurate measurements and marking",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=25,
            alternatives=("Speed Square", "Try Square"),
        ),
        CatalogTool(
            name="Block Plane",
            category=ToolCategory.HAND_TOOLS,
            reason="Perfect for smoothing and fine adjustments",
            priority=Priority.HIGH,
            skill_levels=APPRENTICE_AND_UP,
            estimated_cost=45,
            alternatives=("Smoothing Plane", "Low-Angle Block Plane"),
        ),
        CatalogTool(
            name="Dovetail Saw",
            category=ToolCategory.HAND_TOOLS,
            reason="Precision cutting for joinery work",
            priority=Priority.MEDIUM,
            skill_levels=JOURNEYMAN_AND_UP,
            estimated_cost=65,
            alternatives=("Tenon Saw", "Carcass Saw"),
        ),
    ),
    CraftSpecialization.METALWORKING: (
        CatalogTool(
            name="Digital Calipers",
            category=ToolCategory.MEASURING,
            reason="Precise measurements essential for metalwork",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=35,
            alternatives=("Dial Calipers", "Vernier Calipers"),
        ),
        CatalogTool(
            name="Center Punch Set",
            category=ToolCategory.HAND_TOOLS,
            reason="Mark precise drilling locations",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=20,
            alternatives=("Automatic Center Punch", "Spring-loaded Punch"),
        ),
    ),
    CraftSpecialization.POTTERY: (
        CatalogTool(
            name="Wire Clay Cutter",
            category=ToolCategory.HAND_TOOLS,
            reason="Essential for cutting clay from wheel and blocks",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=15,
            alternatives=("Fishing Line", "Piano Wire"),
        ),
        CatalogTool(
            name="Trimming Tool Set",
            category=ToolCategory.HAND_TOOLS,
            reason="Cleans up foot rings and walls at leather-hard stage",
            priority=Priority.MEDIUM,
            skill_levels=APPRENTICE_AND_UP,
            estimated_cost=18,
            alternatives=("Loop Tools", "Ribbon Tools"),
        ),
    ),
    CraftSpecialization.LEATHERCRAFT: (
        CatalogTool(
            name="Pricking Irons",
            category=ToolCategory.HAND_TOOLS,
            reason="Evenly spaced stitch holes for saddle stitching",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=30,
            alternatives=("Diamond Awl", "Overstitch Wheel"),
        ),
        CatalogTool(
            name="Swivel Knife",
            category=ToolCategory.SPECIALIZED,
            reason="Cuts design lines for tooling and carving",
            priority=Priority.LOW,
            skill_levels=JOURNEYMAN_AND_UP,
            estimated_cost=40,
            alternatives=("Craft Knife",),
        ),
    ),
    CraftSpecialization.BLACKSMITHING: (
        CatalogTool(
            name="Forge Tongs",
            category=ToolCategory.HAND_TOOLS,
            reason="Safe, secure grip on hot stock",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=50,
            alternatives=("Vise-Grip Tongs",),
        ),
        CatalogTool(
            name="Heat-Resistant Gloves",
            category=ToolCategory.SAFETY,
            reason="Protects hands from radiant heat and scale",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=25,
            alternatives=("Welding Gloves",),
        ),
    ),
    CraftSpecialization.JEWELRY: (
        CatalogTool(
            name="Flush Cutters",
            category=ToolCategory.HAND_TOOLS,
            reason="Clean wire ends that need little filing",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=20,
            alternatives=("Side Cutters",),
        ),
        CatalogTool(
            name="Ring Mandrel",
            category=ToolCategory.SPECIALIZED,
            reason="Sizes and shapes rings consistently",
            priority=Priority.MEDIUM,
            skill_levels=APPRENTICE_AND_UP,
            estimated_cost=22,
            alternatives=("Dowel Set",),
        ),
    ),
    CraftSpecialization.WEAVING: (
        CatalogTool(
            name="Warping Board",
            category=ToolCategory.SPECIALIZED,
            reason="Winds long warps with an accurate cross",
            priority=Priority.MEDIUM,
            skill_levels=APPRENTICE_AND_UP,
            estimated_cost=60,
            alternatives=("Warping Pegs", "Warping Reel"),
        ),
    ),
    CraftSpecialization.BUSHCRAFT: (),
    CraftSpecialization.STONEMASONRY: (
        CatalogTool(
            name="Safety Goggles",
            category=ToolCategory.SAFETY,
            reason="Stone chips fly unpredictably",
            priority=Priority.HIGH,
            skill_levels=ALL_SKILL_LEVELS,
            estimated_cost=12,
            alternatives=("Face Shield",),
        ),
    ),
    CraftSpecialization.GLASSBLOWING: (),
    CraftSpecialization.GENERAL: (
        CatalogTool(
            name="Digital Multimeter",
            category=ToolCategory.MEASURING,
            reason="Versatile tool for electrical measurements",
            priority=Priority.MEDIUM,
            skill_levels=APPRENTICE_AND_UP,
            estimated_cost=40,
            alternatives=("Analog Multimeter", "Voltage Tester"),
        ),
    ),
}


def missing_catalog_crafts(catalog: ToolCatalog) -> list:
    """Crafts with no entry (not even an empty one) in the catalog."""
    return [craft for craft in CraftSpecialization if craft not in catalog]
