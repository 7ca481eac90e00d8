# MIT License
"""Static configuration for the compost coordinator.

This module holds the immutable material-flow graph (nodes and edges),
the category palette, the diagram settings and the equipment catalog.
Everything is declared once as pydantic models and validated at import
time, so a malformed catalog fails loudly during development rather
than while the dashboard is running.

The rest of the package treats these objects as read-only input.
"""
from __future__ import annotations
from typing import Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

Category = Literal["input", "labor", "composting", "processing", "output"]
Period = Literal["week", "month"]

WEEKS_PER_MONTH = 4


class NormalizedPoint(BaseModel):
    """A canvas-relative coordinate expressed as fractions of width/height."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(0.5, description="Fraction of canvas width")
    y: float = Field(0.5, description="Fraction of canvas height")


class Task(BaseModel):
    """A recurring sub-task of a node.

    Attributes
    ----------
    name:
        Display name of the task.
    minutes:
        Duration per period at the reference household count.
    period:
        Either ``"week"`` or ``"month"``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    minutes: float = Field(..., ge=0.0)
    period: Period = "week"

    @property
    def periods_per_month(self) -> float:
        return float(WEEKS_PER_MONTH) if self.period == "week" else 1.0

    @property
    def hours_per_month(self) -> float:
        """Unscaled hours per month (``minutes / 60 × periods per month``)."""
        return self.minutes / 60.0 * self.periods_per_month


class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    category: Category
    icon: str = ""
    description: str = ""
    position: NormalizedPoint = Field(default_factory=NormalizedPoint)
    tasks: Tuple[Task, ...] = ()


class Edge(BaseModel):
    """A directed material flow between two nodes.

    ``bidirectional`` only changes how the connector is drawn; routing is
    identical either way.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    material: str
    icon: str = ""
    label: str = ""
    color: str = "#84cc16"
    bidirectional: bool = False


class DiagramSettings(BaseModel):
    """Geometry and interaction constants for the flow diagram."""

    model_config = ConfigDict(frozen=True)

    canvas_width: float = Field(1200.0, gt=0)
    canvas_height: float = Field(520.0, gt=0)
    node_width: float = Field(120.0, ge=0)
    node_height: float = Field(60.0, ge=0)
    edge_curve: float = Field(0.3, ge=0.0, le=1.0, description="Horizontal control-point offset as a fraction of Δx")
    padding: float = Field(40.0, ge=0, description="Inset applied on every side of the canvas (px)")
    label_offset: float = Field(10.0, description="Upward shift of edge labels from the path midpoint (px)")
    drag_threshold_px: float = Field(5.0, ge=0, description="Displacement separating a click from a drag")
    drag_min: float = Field(0.05, ge=0.0, le=1.0)
    drag_max: float = Field(0.95, ge=0.0, le=1.0)
    drag_grid: float = Field(0.01, gt=0.0, description="Granularity of persisted coordinates")
    storage_namespace: str = "compost-positions"


class EquipmentItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    cost: float = Field(..., ge=0.0)
    description: str
    depreciation_years: float = Field(..., gt=0.0)


class SetupCost(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: str
    cost: float = Field(..., ge=0.0)


def _t(name: str, minutes: float, period: Period = "week") -> Task:
    return Task(name=name, minutes=minutes, period=period)


NODE_LIST: List[Node] = [
    Node(
        id="households",
        label="Households",
        category="input",
        icon="🏠",
        position=NormalizedPoint(x=0.05, y=0.5),
        description="Participating households that provide food waste and cardboard",
    ),
    Node(
        id="collection",
        label="Collection Route",
        category="labor",
        icon="🚛",
        position=NormalizedPoint(x=0.18, y=0.5),
        description="Weekly pickup of food waste and cardboard from households",
        tasks=(
            _t("Drive route", 45),
            _t("Collect food waste buckets", 75),
            _t("Collect cardboard", 45),
            _t("Return clean buckets", 45),
            _t("Bucket cleaning", 30),
        ),
    ),
    Node(
        id="cardboard",
        label="Cardboard Processing",
        category="labor",
        icon="📦",
        position=NormalizedPoint(x=0.31, y=0.25),
        description="Break down, shred, and prepare cardboard for composting",
        tasks=(
            _t("Break down + remove plastic", 90),
            _t("Shred", 45),
            _t("Bag/containerize", 15),
        ),
    ),
    Node(
        id="stage1",
        label="Stage 1: Active",
        category="composting",
        icon="🔥",
        position=NormalizedPoint(x=0.44, y=0.5),
        description="Hot composting phase - thermophilic bacteria break down material at 130-160°F",
        tasks=(
            _t("Add materials", 30),
            _t("Monitor temperature", 5),
        ),
    ),
    Node(
        id="stage2",
        label="Stage 2: Cooling",
        category="composting",
        icon="🌡️",
        position=NormalizedPoint(x=0.54, y=0.5),
        description="Temperature drops, mesophilic bacteria take over",
        tasks=(
            _t("Move pile from Stage 1", 60, "month"),
            _t("Monitor moisture", 5),
        ),
    ),
    Node(
        id="stage3",
        label="Stage 3: Worms",
        category="composting",
        icon="🪱",
        position=NormalizedPoint(x=0.64, y=0.5),
        description="Worms enter and process material into castings",
        tasks=(
            _t("Move pile from Stage 2", 60, "month"),
            _t("Maintain wedge connection", 10, "month"),
        ),
    ),
    Node(
        id="stage4",
        label="Stage 4: Harvest",
        category="composting",
        icon="🌱",
        position=NormalizedPoint(x=0.74, y=0.5),
        description="Spread, expose to light, harvest finished vermicompost",
        tasks=(
            _t("Move pile from Stage 3", 60, "month"),
            _t("Spread and light expose", 30, "month"),
            _t("Harvest castings", 30, "month"),
        ),
    ),
    Node(
        id="tea",
        label="Worm Tea Brewing",
        category="processing",
        icon="💧",
        position=NormalizedPoint(x=0.74, y=0.25),
        description="Brew aerated worm tea from finished castings",
        tasks=(
            _t("Collect castings", 15, "month"),
            _t("Set up brew", 20, "month"),
            _t("Load brew vat", 15, "month"),
            _t("Apply at customer sites", 50, "month"),
        ),
    ),
    Node(
        id="delivery",
        label="Delivery",
        category="labor",
        icon="🚚",
        position=NormalizedPoint(x=0.84, y=0.5),
        description="Load truck, deliver to customers, apply worm tea",
        tasks=(
            _t("Load truck", 60, "month"),
            _t("Customer stops", 300, "month"),
        ),
    ),
    Node(
        id="customers",
        label="Customers",
        category="output",
        icon="🏡",
        position=NormalizedPoint(x=0.95, y=0.5),
        description="External buyers plus subscribers receiving give-back",
    ),
]

NODES: Dict[str, Node] = {n.id: n for n in NODE_LIST}

_FOOD = "#22c55e"
_CARDBOARD = "#f59e0b"
_COMPOST = "#84cc16"
_WORMS = "#ec4899"
_TEA = "#06b6d4"

EDGES: List[Edge] = [
    Edge(id="food-households-collection", source="households", target="collection", material="food", icon="🍎", label="food waste", color=_FOOD),
    Edge(id="food-collection-stage1", source="collection", target="stage1", material="food", icon="🍎", color=_FOOD),
    Edge(id="cardboard-households-collection", source="households", target="collection", material="cardboard", icon="📦", label="cardboard", color=_CARDBOARD),
    Edge(id="cardboard-collection-processing", source="collection", target="cardboard", material="cardboard", icon="📦", color=_CARDBOARD),
    Edge(id="cardboard-processing-stage1", source="cardboard", target="stage1", material="cardboard", icon="📦", label="shredded", color=_CARDBOARD),
    Edge(id="compost-stage1-stage2", source="stage1", target="stage2", material="compost", icon="🌱", color=_COMPOST),
    Edge(id="compost-stage2-stage3", source="stage2", target="stage3", material="compost", icon="🌱", color=_COMPOST),
    Edge(id="compost-stage3-stage4", source="stage3", target="stage4", material="compost", icon="🌱", color=_COMPOST),
    Edge(id="worms-stage4-stage3", source="stage4", target="stage3", material="worms", icon="🪱", label="worm migration", color=_WORMS, bidirectional=True),
    Edge(id="castings-stage4-tea", source="stage4", target="tea", material="castings", icon="🌱", label="castings", color=_TEA),
    Edge(id="tea-tea-delivery", source="tea", target="delivery", material="tea", icon="💧", label="worm tea", color=_TEA),
    Edge(id="compost-stage4-delivery", source="stage4", target="delivery", material="compost", icon="🌱", label="finished compost", color=_COMPOST),
    Edge(id="products-delivery-customers", source="delivery", target="customers", material="products", icon="🌱", color=_COMPOST),
]

CATEGORY_COLORS: Dict[str, str] = {
    "input": "#6366f1",
    "labor": "#f59e0b",
    "composting": "#22c55e",
    "processing": "#06b6d4",
    "output": "#ec4899",
}

DIAGRAM = DiagramSettings()

# Seasonal operation: collection continues through winter, sales pause.
ACTIVE_MONTHS = 9
WINTER_MONTHS = 3
WINTER_NOTE = "Collection continues year-round. Composting slows in winter. Sales resume in spring."

OPTIONAL_EQUIPMENT_CATEGORY = "lawn_service"


def _eq(key: str, cost: float, description: str, years: float) -> EquipmentItem:
    return EquipmentItem(key=key, cost=cost, description=description, depreciation_years=years)


EQUIPMENT: Dict[str, List[EquipmentItem]] = {
    "composting": [
        _eq("pallet_bins", 0, "4x pallet bins (free/salvaged)", 10),
        _eq("pitchforks", 50, "2x pitchforks", 5),
        _eq("wheelbarrow", 150, "Heavy-duty wheelbarrow", 10),
        _eq("buckets", 100, "20x 5-gal buckets for collection", 3),
        _eq("thermometer", 30, "Compost thermometer", 5),
    ],
    "cardboard": [
        _eq("shredder", 200, "Electric leaf shredder (doubles for cardboard)", 5),
    ],
    "worm_tea": [
        _eq("brewing_vat", 100, "50-gal drum + aerator pump", 5),
        _eq("spigots", 30, "Spigots and fittings", 5),
    ],
    "logistics": [
        _eq("zero_turn", 4000, 'Used zero-turn mower (Husqvarna/Toro 54")', 7),
        _eq("atv", 2500, "Used ATV (Honda Rancher/Yamaha Grizzly)", 10),
        _eq("trailer", 500, "Small utility trailer", 10),
    ],
    OPTIONAL_EQUIPMENT_CATEGORY: [
        _eq("backpack_blower", 400, "Gas backpack blower (Stihl/Echo)", 7),
        _eq("cyclone_rake", 2500, "Cyclone Rake tow-behind vacuum (415 gal)", 10),
    ],
}

SETUP_COSTS: List[SetupCost] = [
    SetupCost(item="Shredder", cost=40),
    SetupCost(item="Buckets (15)", cost=75),
    SetupCost(item="Aeration pipes (PVC)", cost=30),
    SetupCost(item="Aquarium pump + airstone", cost=20),
    SetupCost(item="Initial worms (1 lb)", cost=30),
    SetupCost(item="Misc (tarp, bags, tools)", cost=50),
]


def get_node(node_id: str) -> Optional[Node]:
    return NODES.get(node_id)
