"""Streamlit entry point for the compost coordinator dashboard.

This script holds the parameter sliders, the headline metrics and the
material-flow diagram.  Clicking a node opens its task breakdown.  More
detailed views live in separate files under the `pages/` directory.
"""

import logging

import streamlit as st

from compost_core.calculator import DerivedModel, calculate_full_model, task_breakdown_frame
from compost_core.catalog import DIAGRAM, NODES, WINTER_NOTE
from compost_core.interaction import CanvasRect, InteractionController, build_controller
from compost_core.layout import CanvasSize
from compost_core.metrics import node_metrics
from compost_core.params import InputParams, RANGES, apply_input
from compost_core.plots import fig_flow_diagram, fig_labor_breakdown, fig_revenue_donut
from compost_core.utils import params_hash

st.set_page_config(page_title="Compost Coordinator", layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

SLIDERS = [
    ("households", "Households"),
    ("compost_price", "Compost price ($/gal)"),
    ("tea_price", "Worm tea price ($/gal)"),
    ("subscription_price", "Subscription ($/household/mo)"),
    ("giveback_per_year", "Give-back (gal/household/yr)"),
]

CANVAS = CanvasSize(DIAGRAM.canvas_width, DIAGRAM.canvas_height)


def _get_params() -> InputParams:
    if "params" not in st.session_state:
        st.session_state.params = InputParams()
    return st.session_state.params


def _get_controller() -> InteractionController:
    """Position store, layout engine and controller shared across pages."""
    if "controller" not in st.session_state:
        st.session_state.controller = build_controller()
    return st.session_state.controller


def _get_model(params: InputParams) -> DerivedModel:
    key = params_hash(params)
    if st.session_state.get("model_key") != key:
        st.session_state.model = calculate_full_model(params)
        st.session_state.model_key = key
    return st.session_state.model


def sidebar_inputs(params: InputParams) -> InputParams:
    st.sidebar.header("Levers")
    raw = {}
    for key, label in SLIDERS:
        rng = RANGES[key]
        raw[key] = st.sidebar.slider(
            label,
            min_value=int(rng.min),
            max_value=int(rng.max),
            value=int(rng.clamp(getattr(params, key))),
            step=int(rng.step),
        )
    raw["include_lawn_service"] = st.sidebar.checkbox(
        "Include leaf/lawn service equipment", value=params.include_lawn_service
    )
    return apply_input(params, raw)


def _selected_node(event) -> str:
    """Node id of the clicked marker in a plotly selection event, if any."""
    try:
        points = event.selection.points
    except AttributeError:
        return ""
    for point in points:
        data = point.get("customdata")
        if isinstance(data, (list, tuple)):
            data = data[0] if data else None
        if data in NODES:
            return data
    return ""


def show_node_detail(node_id: str, households: int) -> None:
    node = NODES[node_id]
    st.subheader(f"{node.icon} {node.label}")
    st.caption(node.description)
    df = task_breakdown_frame(node_id, households)
    if df.empty:
        st.write("No recurring tasks for this stage.")
        return
    table = df[["name", "minutes", "period", "hours_per_month"]].rename(
        columns={"name": "Task", "minutes": "Minutes", "period": "Per", "hours_per_month": "Hours / month"}
    )
    st.dataframe(table, hide_index=True, use_container_width=True)
    st.markdown(f"**Total:** {df['hours_per_month'].sum():.1f} hr/mo")


def main() -> None:
    params = sidebar_inputs(_get_params())
    st.session_state.params = params
    model = _get_model(params)
    controller = _get_controller()

    st.title("Compost Coordinator")
    st.caption("Food waste and cardboard in, vermicompost and worm tea out.")

    c1, c2, c3 = st.columns(3)
    c1.metric("Monthly revenue", f"${model.revenue.total:,.0f}")
    c2.metric("Labor hours / month", f"{model.labor.total:.1f}")
    c3.metric("Effective hourly rate", f"${model.hourly_rate:,.0f}")

    engine = controller.engine
    node_layout = engine.compute_node_layout(CANVAS)
    edge_layout = engine.compute_edge_layout(CANVAS, node_layout)
    selected = st.session_state.get("selected_node")
    fig = fig_flow_diagram(NODES, node_layout, edge_layout, node_metrics(model), CANVAS, selected=selected)
    event = st.plotly_chart(fig, on_select="rerun", selection_mode="points", key="flow_diagram")

    clicked = _selected_node(event)
    if clicked and clicked != selected:
        # plotly only reports completed clicks, so this is a zero-displacement gesture
        centre = node_layout[clicked]
        rect = CanvasRect(0.0, 0.0, CANVAS.width, CANVAS.height)
        controller.pointer_down(clicked, centre.x, centre.y, rect)
        outcome = controller.pointer_up(centre.x, centre.y)
        if outcome.kind == "click":
            st.session_state.selected_node = outcome.node_id
            selected = outcome.node_id
    elif not clicked:
        st.session_state.selected_node = None
        selected = None

    if selected:
        with st.container(border=True):
            show_node_detail(selected, params.households)

    st.markdown("---")
    col_a, col_b, col_c = st.columns(3)
    with col_a:
        st.subheader("Inputs")
        st.write(f"Cardboard: **{model.inputs.cardboard_per_month:,.0f} gal/mo**")
        st.write(f"Food waste: **{model.inputs.food_waste_per_month:,.0f} gal/mo**")
    with col_b:
        st.subheader("Products")
        out = model.outputs
        st.write(f"Finished compost: **{out.finished_compost_per_month:,.0f} gal**")
        st.write(f"Give-back: **-{out.giveback_per_month:,.1f} gal**")
        st.write(f"Sellable compost: **{out.sellable_compost:,.1f} gal**")
        st.write(f"Worm tea concentrate: **{out.worm_tea_concentrate:,.0f} gal**")
    with col_c:
        st.subheader("Annual (9 active + 3 winter months)")
        st.write(f"Revenue: **${model.annual.revenue:,.0f}**")
        st.write(f"Hours: **{model.annual.hours:,.0f}**")
        st.write(f"Rate: **${model.annual.hourly_rate:,.0f}/hr**")
        st.caption(WINTER_NOTE)

    ch1, ch2 = st.columns(2)
    ch1.plotly_chart(fig_revenue_donut(model.revenue), use_container_width=True)
    ch2.plotly_chart(fig_labor_breakdown(model.labor), use_container_width=True)


if __name__ == "__main__":
    main()
