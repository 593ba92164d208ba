import html
import logging
import sys
from pathlib import Path

import pandas as pd
import plotly.express as px
import streamlit as st

# ------------------------------------------------------------------
# Local imports (run with `streamlit run ui/app.py` from a checkout)
# ------------------------------------------------------------------
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from retail_sales.core.config import API_URL, EXPORT_FILE_NAME, SAMPLE_DAYS  # type: ignore
from retail_sales.models.schemas import AppState  # type: ignore
from retail_sales.services import session  # type: ignore
from retail_sales.services.client import ForecastClient  # type: ignore
from retail_sales.services.metrics import accuracy_pct, best_model_metrics  # type: ignore

logging.basicConfig(level=logging.INFO)

# ------------------------------------------------------------------
# Config / constants
# ------------------------------------------------------------------
APP_TITLE = "Retail Sales AI"
APP_SUBTITLE = "Forecasting API + Machine Learning"
STATUS_LABELS = {
    "connected": ("API Online", "#16a34a"),
    "error": ("API Offline", "#dc2626"),
    "checking": ("Checking...", "#d97706"),
}


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------
@st.cache_resource(show_spinner=False)
def get_client() -> ForecastClient:
    return ForecastClient(API_URL)


def get_state() -> AppState:
    if "app" not in st.session_state:
        st.session_state.app = AppState()
    return st.session_state.app


def put_state(state: AppState):
    st.session_state.app = state


def on_file_change():
    uploaded = st.session_state.get("uploader")
    if uploaded is not None:
        put_state(session.load_file(get_state(), uploaded.name, uploaded.getvalue()))


def on_sample():
    put_state(session.load_sample(get_state(), get_client()))


def on_train():
    put_state(session.train(get_state(), get_client()))


def on_train_with_file():
    put_state(session.train_with_file(get_state(), get_client()))


def on_download():
    put_state(session.record_download(get_state()))


def on_reset():
    put_state(session.reset(get_state()))


def records_frame(records) -> pd.DataFrame:
    df = pd.DataFrame([r.model_dump() for r in records])
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"])
    return df


# ------------------------------------------------------------------
# Layout / theme
# ------------------------------------------------------------------
st.set_page_config(page_title=APP_TITLE, page_icon="📈", layout="wide")

st.markdown(
    """
    <style>
    .hero {
        display:flex;
        align-items:center;
        justify-content:space-between;
        padding: 20px 24px;
        border-radius: 18px;
        background: linear-gradient(120deg, #0f172a 0%, #581c87 50%, #0f172a 100%);
        color: #fff;
        box-shadow: 0 14px 28px rgba(15,23,42,0.2);
        margin-bottom: 20px;
    }
    .hero-left h1 {margin:0; font-size: 27px; letter-spacing:0.4px; color:#fff;}
    .hero-left p {margin:8px 0 0; opacity:0.8;}
    .status {padding: 6px 12px; border-radius: 10px; font-weight: 700; background: rgba(255,255,255,0.1);}
    div.stButton > button {
        background: linear-gradient(120deg, #9333ea, #db2777);
        color: #fff;
        border: none;
        border-radius: 12px;
        padding: 0.7rem 1.4rem;
        font-weight: 700;
    }
    .log-box {
        background: #0f172a;
        color: #4ade80;
        font-family: monospace;
        padding: 12px 14px;
        border-radius: 12px;
        max-height: 380px;
        overflow-y: auto;
    }
    .log-box span {color: #c084fc;}
    </style>
    """,
    unsafe_allow_html=True,
)

state = get_state()
if state.api_status == "checking":
    state = session.check_api(state, get_client())
    put_state(state)

label, color = STATUS_LABELS[state.api_status]
c_hero, c_export = st.columns([4, 1])
with c_hero:
    st.markdown(
        f"""
        <div class="hero">
          <div class="hero-left">
            <h1>{APP_TITLE}</h1>
            <p>{APP_SUBTITLE}</p>
          </div>
          <div class="status" style="color:{color};">{label}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )
with c_export:
    csv = session.export_predictions(state)
    st.download_button(
        "Export",
        data=csv or "",
        file_name=EXPORT_FILE_NAME,
        mime="text/csv",
        disabled=csv is None,
        on_click=on_download,
        key="export_btn",
    )

# ------------------------------------------------------------------
# Data source
# ------------------------------------------------------------------
if state.data is None:
    c_upload, c_sample = st.columns(2)
    with c_upload:
        st.markdown("### Upload data")
        st.caption("CSV with columns: date, sales")
        st.file_uploader("Choose file", type=["csv"], key="uploader", on_change=on_file_change)
    with c_sample:
        st.markdown("### Demo data")
        st.caption(f"{SAMPLE_DAYS} days of synthetic sales")
        st.button("Generate sample", on_click=on_sample, key="sample_btn")

# ------------------------------------------------------------------
# Train
# ------------------------------------------------------------------
elif state.results is None:
    st.markdown(f"#### Loaded **{len(state.data)}** records")
    if state.file_name:
        st.caption(f"File: {state.file_name}")
    c_up, c_train = st.columns(2)
    if state.file_name and state.api_status == "connected":
        c_up.button("Upload to API", on_click=on_train_with_file, disabled=state.training, key="upload_btn")
    c_train.button("Train models", type="primary", on_click=on_train, disabled=state.training, key="train_btn")
    if state.api_status == "error":
        st.warning("API offline - local mode will be used")

# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------
if state.results is not None:
    results = state.results
    best = best_model_metrics(results)
    tab_overview, tab_pred, tab_feat, tab_logs = st.tabs(
        ["📊 Overview", "📈 Predictions", "🧩 Features", "🧾 Logs"]
    )

    with tab_overview:
        if best:
            k1, k2, k3, k4 = st.columns(4)
            k1.metric("Accuracy", f"{accuracy_pct(best):.1f}%")
            k2.metric("MAE", f"${best.mae:,.0f}")
            k3.metric("R² Score", f"{best.r2:.3f}")
            k4.metric("RMSE", f"${best.rmse:,.0f}")

        st.markdown("### Model comparison")
        table = pd.DataFrame([m.model_dump() for m in results.models])
        table["name"] = [
            f"{n}  ✅ BEST" if n == results.best_model else n for n in table["name"]
        ]
        table = table.rename(columns={"name": "Model", "mae": "MAE", "rmse": "RMSE", "r2": "R²", "mape": "MAPE"})
        st.dataframe(
            table.style.format({"MAE": "${:,.2f}", "RMSE": "${:,.2f}", "R²": "{:.4f}", "MAPE": "{:.2f}%"}),
            use_container_width=True,
        )

    with tab_pred:
        pred_df = records_frame(state.predictions or [])
        if not pred_df.empty:
            melt = pred_df.melt(id_vars="date", value_vars=["actual", "predicted"], var_name="Series", value_name="Sales")
            fig = px.line(
                melt,
                x="date",
                y="Sales",
                color="Series",
                title="Test predictions vs actual",
                color_discrete_map={"actual": "#10b981", "predicted": "#ec4899"},
            )
            fig.update_layout(legend_title_text="", margin=dict(l=0, r=0, t=30, b=0))
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No held-out predictions.")

        future_df = records_frame(results.future_predictions)
        if not future_df.empty:
            fig2 = px.line(future_df, x="date", y="predicted", title="Future predictions (30 days)")
            fig2.update_traces(line_color="#f59e0b", line_width=3)
            st.plotly_chart(fig2, use_container_width=True)

    with tab_feat:
        if results.feature_importance:
            feat = pd.DataFrame([f.model_dump() for f in results.feature_importance])
            fig3 = px.bar(
                feat.sort_values("importance"),
                x="importance",
                y="feature",
                orientation="h",
                title="Feature importance",
            )
            fig3.update_traces(marker_color="#8b5cf6")
            st.plotly_chart(fig3, use_container_width=True)

    with tab_logs:
        lines = "<br/>".join(f"<span>[{e.time}]</span> {html.escape(e.message)}" for e in state.logs)
        st.markdown(f'<div class="log-box">{lines}</div>', unsafe_allow_html=True)

    st.button("New analysis", on_click=on_reset, key="reset_btn")
