"""
Streamlit UI for stockledger, inventory snapshot dashboard.

Features:
 - Upload an inventory_movements.csv / products.csv or use the sample data in data/
 - Regenerate a synthetic movement log with chosen seed and parameters
 - Point-in-time snapshot table for any date, downloadable as CSV
 - Running balance chart per product
"""
import os
import pathlib
from datetime import date

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

from stockledger.balance import running_balance_frame, snapshot_frame
from stockledger.config import GeneratorConfig
from stockledger.data_utils import load_movements, load_products
from stockledger.errors import InvalidParameter, UnknownEntity
from stockledger.generator import generate_movement_log

ROOT = str(pathlib.Path(__file__).resolve().parents[1])

st.set_page_config(page_title="stockledger: Inventory snapshot", layout="wide")
st.title("stockledger: Inventory snapshot")
st.markdown("Load or generate an inventory movement log, then inspect stock on hand as of any date.")

# Sidebar for parameters
with st.sidebar:
    st.header("Generator parameters")
    seed = st.number_input("Seed", value=42, step=1)
    n_movements = st.number_input("Movements per product", value=30, min_value=0, step=1)
    opening_stock = st.number_input("Opening stock", value=200, min_value=0, step=10)
    outflow_cap = st.number_input("Max OUT quantity", value=120, min_value=1, step=10)
    regenerate = st.checkbox("Generate log instead of loading CSV", value=False)

# Data upload / sample
st.header("Data upload / sample")
movements_file = st.file_uploader("Upload inventory_movements.csv (movement_id, product_id, movement_type, quantity, movement_date)", type=["csv"])
products_file = st.file_uploader("Upload products.csv (product_id, product_name)", type=["csv"])

try:
    if products_file:
        products = load_products(products_file)
    elif os.path.exists(os.path.join(ROOT, "data", "products.csv")):
        products = load_products(os.path.join(ROOT, "data", "products.csv"))
    else:
        products = None
except InvalidParameter as e:
    st.error(f"Could not load products: {e}")
    st.stop()

if regenerate:
    if products is None:
        st.warning("Generating a log needs products.csv (upload one or run scripts/generate_sample_data.py).")
        st.stop()
    config = GeneratorConfig(
        seed=int(seed),
        movements_per_entity=int(n_movements),
        opening_stock=int(opening_stock),
        outflow_cap=int(outflow_cap),
    )
    try:
        log = generate_movement_log(products["product_id"].tolist(), config)
    except InvalidParameter as e:
        st.error(f"Could not generate movements: {e}")
        st.stop()
elif movements_file:
    try:
        log = load_movements(movements_file)
    except InvalidParameter as e:
        st.error(f"Could not load movements: {e}")
        st.stop()
else:
    sample = os.path.join(ROOT, "data", "inventory_movements.csv")
    if not os.path.exists(sample):
        st.warning("No movements loaded. Upload a CSV, enable generation, or run scripts/generate_sample_data.py.")
        st.stop()
    try:
        log = load_movements(sample)
    except InvalidParameter as e:
        st.error(f"Could not load {sample}: {e}")
        st.stop()

history = running_balance_frame(log)
st.success(f"{len(history)} movements loaded for {history['product_id'].nunique()} products.")
st.dataframe(history.head(10))

# Snapshot
st.header("Snapshot")
default_day = history["movement_date"].max() if not history.empty else date.today()
as_of = st.date_input("As of date", value=pd.Timestamp(default_day).date())
try:
    snap = snapshot_frame(log, as_of, products=products)
except UnknownEntity as e:
    st.error(f"Movement log names a product missing from products.csv: {e.entity_id}")
    st.stop()
st.dataframe(snap)
st.download_button("Download snapshot (CSV)", snap.to_csv(index=False), file_name=f"snapshot_{as_of}.csv")

# Per-product running balance chart
st.header("Running balance")
product_list = sorted(history["product_id"].unique().tolist())
if product_list:
    selected = st.selectbox("Choose product to plot", product_list)
    p = history[history["product_id"] == selected]
    fig, ax = plt.subplots(figsize=(8, 3))
    ax.step(pd.to_datetime(p["movement_date"]), p["running_balance"], where="post", label="running_balance")
    ax.axvline(pd.Timestamp(as_of), color="grey", linestyle="--", label="as of")
    ax.set_title(f"Stock on hand for {selected}")
    ax.set_xlabel("date")
    ax.set_ylabel("units")
    ax.legend()
    st.pyplot(fig)
