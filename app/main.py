import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

import streamlit as st
import pandas as pd
import numpy as np
import plotly.express as px

from subtracker.config import load_settings
from subtracker.domain import BillingPeriod, InsightKind
from subtracker.errors import StoreError
from subtracker.log import setup_logging
from subtracker.services import DashboardService
from subtracker.store import build_store

logger = logging.getLogger(__name__)

st.set_page_config(page_title="SubTracker", layout="wide")

settings = load_settings()
setup_logging(settings.log_level, settings.log_format)
cur = settings.currency

if "service" not in st.session_state:
    st.session_state.service = DashboardService(
        build_store(settings),
        currency=settings.currency,
        alert_threshold=settings.alert_threshold,
    )
service: DashboardService = st.session_state.service

st.sidebar.markdown("### 👤 Profile")
user_id = st.sidebar.text_input("User", value=st.session_state.get("user_id", "demo"))
st.session_state["user_id"] = user_id
if not user_id:
    st.sidebar.warning("Enter a user name to see subscriptions.")
    st.stop()

for notice in service.drain_notices():
    st.toast(notice)

try:
    view = service.dashboard(user_id)
except StoreError as e:
    logger.exception("could not load subscriptions for %s", user_id)
    st.error(f"Could not load subscriptions: {e}")
    st.stop()

subscriptions = view["subscriptions"]
totals = view["totals"]
stats = view["stats"]

menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "📋 Subscriptions", "💡 Insights"])

if menu == "🏠 Dashboard":
    st.title("SubTracker")
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Monthly Spend", f"{cur}{totals.monthly_total:,.2f}")
        st.caption("Active recurring subscriptions")
    with k2:
        st.metric("Yearly Projection", f"{cur}{totals.total_yearly_spend:,.2f}")
        st.caption("Total annual cost")
    with k3:
        st.metric("Active Subscriptions", stats["count"])
        st.caption("Services being tracked")

    st.subheader("Spending Breakdown")
    if not view["breakdown"]:
        st.info("No subscriptions to display")
    else:
        df = pd.DataFrame([
            {
                "Service": item.name,
                "Monthly equivalent": item.monthly_equivalent,
                "Cost": item.original_cost,
                "Period": "month" if item.billing_period == BillingPeriod.MONTHLY else "year",
            }
            for item in view["breakdown"]
        ])
        values = df["Monthly equivalent"].to_numpy()
        df["Share %"] = np.round(values / values.sum() * 100, 1)

        fig = px.pie(
            df,
            values="Monthly equivalent",
            names="Service",
            hole=0.5,
            title="Monthly cost distribution",
            template="plotly_dark",
            hover_data=["Cost", "Period"],
        )
        st.plotly_chart(fig, use_container_width=True)

        disp = df.copy()
        disp["Monthly equivalent"] = disp["Monthly equivalent"].map(lambda x: f"{cur}{x:,.2f}/mo")
        disp["Cost"] = disp["Cost"].map(lambda x: f"{cur}{x:,.2f}")
        st.table(disp)
        st.markdown(f"**Total Monthly:** {cur}{stats['total_monthly_equivalent']:,.2f}")
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="subscriptions.csv")

elif menu == "📋 Subscriptions":
    st.title("📋 Your Subscriptions")

    with st.form("add_subscription", clear_on_submit=True):
        st.subheader("Add New Subscription")
        name = st.text_input("Service Name *", placeholder="e.g. Netflix, Spotify")
        c1, c2 = st.columns(2)
        with c1:
            cost = st.text_input("Cost *", placeholder="9.99")
        with c2:
            period = st.selectbox("Billing Period *", [p.value for p in BillingPeriod])
        start = st.date_input("Start Date *", value=None)
        notes = st.text_area("Notes (Optional)", placeholder="Premium plan, family subscription, etc.")
        submitted = st.form_submit_button("Add Subscription")

    if submitted:
        form = {"name": name, "cost": cost, "billing_period": period, "start_date": start, "notes": notes}
        try:
            result = service.add_subscription(user_id, form)
        except StoreError as e:
            logger.exception("could not save subscription")
            st.error(f"Could not save subscription: {e}")
        else:
            if result.is_left():
                st.error(result.get_error()["message"])
            else:
                st.rerun()

    if not subscriptions:
        st.info("No subscriptions yet. Add your first one above.")
    for sub in subscriptions:
        with st.container(border=True):
            left, right = st.columns([5, 1])
            with left:
                per = "month" if sub.billing_period == BillingPeriod.MONTHLY else "year"
                st.markdown(f"**{sub.name}** `{sub.billing_period.value}`")
                st.caption(f"{cur}{sub.cost:,.2f} / {per} · Started {sub.start_date:%b %d, %Y}")
                if sub.notes:
                    st.write(sub.notes)
            with right:
                if st.button("🗑 Delete", key=f"del_{sub.id}"):
                    try:
                        service.delete_subscription(user_id, sub.id)
                    except StoreError as e:
                        logger.exception("could not delete subscription %s", sub.id)
                        st.error(f"Could not delete subscription: {e}")
                    else:
                        st.rerun()

elif menu == "💡 Insights":
    st.title("💡 Insights")
    st.caption("Smart suggestions to optimize your subscriptions")

    if not view["insights"]:
        st.success("Great job! Your subscriptions look optimized.")
    show = {InsightKind.WARNING: st.warning, InsightKind.SUGGESTION: st.info, InsightKind.TIP: st.info}
    for insight in view["insights"]:
        show[insight.kind](f"**{insight.title}** ({insight.kind.value})\n\n{insight.message}")
        if insight.suggested_action:
            st.caption(f"➡ {insight.suggested_action}")

    st.divider()
    st.subheader("Quick Stats")
    q1, q2 = st.columns(2)
    q1.metric("Avg. per service", f"{cur}{stats['average_per_service']:,.2f}/mo")
    q2.metric("Most expensive", stats["most_expensive"] or "None")
