from __future__ import annotations
from typing import Dict
import pandas as pd
import plotly.express as px

from carfin_core.models import CalculationType, OwnershipResult


def make_breakdown_df(results: Dict[CalculationType, OwnershipResult]) -> pd.DataFrame:
    """
    Long table with 4 components per calculation type:
      - Financing (monthly payment with VAT and interest x months)
      - Registration (one-time)
      - Road tax (x started years)
      - CO2 surcharge (x started years, 0 for electric)
    Per type the components sum to total_cost.
    """
    rows = []
    for mode, res in results.items():
        rows += [
            {"Type": mode.value, "Component": "Financing",     "EUR": res.financing.total_with_vat_and_interest},
            {"Type": mode.value, "Component": "Registration",  "EUR": res.registration_fee},
            {"Type": mode.value, "Component": "Road tax",      "EUR": res.power_age_tax * res.tax_years},
            {"Type": mode.value, "Component": "CO2 surcharge", "EUR": res.co2_surcharge * res.tax_years},
        ]
    return pd.DataFrame(rows, columns=["Type", "Component", "EUR"])


def fig_bar_breakdown(df_breakdown: pd.DataFrame):
    fig = px.bar(
        df_breakdown,
        x="Type",
        y="EUR",
        color="Component",
        barmode="stack",
        text_auto=".0f",
        title="Total cost of ownership by component",
    )
    fig.update_layout(
        plot_bgcolor="white",
        xaxis=dict(showgrid=False),
        yaxis=dict(showgrid=False, title="EUR"),
        title=dict(x=0, xanchor="left", font=dict(size=20)),
        bargap=0.3,
        legend=dict(orientation="h", x=0, y=1.1),
    )
    totals = df_breakdown.groupby("Type", as_index=False)["EUR"].sum()
    for _, row in totals.iterrows():
        fig.add_annotation(
            x=row["Type"],
            y=row["EUR"],
            text=f"€{row['EUR']:,.0f}",
            showarrow=False,
            font=dict(size=14, color="black"),
            yshift=10,
        )
    return fig


def make_cum_df(results: Dict[CalculationType, OwnershipResult]) -> pd.DataFrame:
    """Table for the cumulative cost line, one row per (type, year)."""
    parts = []
    for mode, res in results.items():
        d = res.yearly_table[["Year", "Cumulative"]].copy()
        d["Type"] = mode.value
        parts.append(d)
    if not parts:
        return pd.DataFrame(columns=["Year", "Cumulative", "Type"])
    return pd.concat(parts, ignore_index=True)


def fig_line_cumulative(cum_df: pd.DataFrame):
    fig = px.line(
        cum_df,
        x="Year",
        y="Cumulative",
        color="Type",
        title="Cumulative cost of ownership",
        markers=True,
    )
    fig.update_layout(
        legend=dict(orientation="h", y=-0.2, x=0.5, xanchor="center"),
        title=dict(x=0, xanchor="left", font=dict(size=15)),
        plot_bgcolor="white",
        yaxis=dict(gridcolor="lightgrey", title="EUR (cumulative)", rangemode="tozero"),
        xaxis=dict(gridcolor="lightgrey", dtick=1),
    )
    return fig
