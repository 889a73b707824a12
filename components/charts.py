"""Plotly chart factory"""
import plotly.graph_objects as go
import plotly.express as px
import pandas as pd

import plotly.io as pio
from config.settings import COLORS

pio.templates["loan_book_light"] = go.layout.Template(
    layout=go.Layout(
        font=dict(family="sans-serif", color="#333"),
        title_font=dict(size=20, color="#333"),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor="#e0e0e0", linecolor="#e0e0e0", zerolinecolor="#e0e0e0"),
        yaxis=dict(gridcolor="#e0e0e0", linecolor="#e0e0e0", zerolinecolor="#e0e0e0"),
        legend=dict(bgcolor="rgba(255,255,255,0.5)", bordercolor="#e0e0e0", borderwidth=1),
        colorway=px.colors.qualitative.Plotly,
    )
)

pio.templates.default = "loan_book_light"


def _get_x_labels(schedule: pd.DataFrame) -> list:
    """Axis labels like "Week 1 2026-10-24"."""
    return [f"Week {int(row['week'])} {row['due_date']}" for _, row in schedule.iterrows()]


def create_schedule_bar(schedule: pd.DataFrame, template: str = "loan_book_light") -> go.Figure:
    """Stacked weekly installments: principal, interest and week-1 fees"""
    fig = go.Figure()
    x_labels = _get_x_labels(schedule)

    fig.add_trace(go.Bar(
        x=x_labels, y=schedule["principal"], name="Principal",
        marker_color=COLORS["principal"],
        hovertemplate="%{x}<br>Principal: %{y:,.2f}<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=x_labels, y=schedule["interest"], name="Interest",
        marker_color=COLORS["interest"],
        hovertemplate="%{x}<br>Interest: %{y:,.2f}<extra></extra>",
    ))
    fees = schedule["processing_fee"] + schedule["registration_fee"]
    if fees.sum() > 0:
        fig.add_trace(go.Bar(
            x=x_labels, y=fees, name="Fees",
            marker_color=COLORS["fees"],
            hovertemplate="%{x}<br>Fees: %{y:,.2f}<extra></extra>",
        ))

    fig.update_layout(
        title="Weekly repayments",
        barmode="stack",
        xaxis_title="Week",
        yaxis_title="Amount",
        margin=dict(t=60, b=60, l=60, r=20),
        height=400,
        template=template,
    )
    return fig


def create_cost_pie(
    principal: float,
    total_interest: float,
    fees: float,
    template: str = "loan_book_light",
) -> go.Figure:
    """Donut of what the customer pays in total"""
    fig = go.Figure(data=[go.Pie(
        labels=["Principal", "Interest", "Fees"],
        values=[principal, total_interest, fees],
        hole=0.45,
        marker_colors=[COLORS["principal"], COLORS["interest"], COLORS["fees"]],
        textinfo="label+percent",
        textposition="outside",
    )])
    fig.update_layout(
        title="Cost breakdown",
        showlegend=True,
        margin=dict(t=60, b=20, l=20, r=20),
        height=400,
        template=template,
    )
    return fig
