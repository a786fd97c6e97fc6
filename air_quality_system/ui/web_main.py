"""
Web UI module for the Air Quality System.

This module provides a Streamlit-based dashboard for the air quality analyzer.
Supports two input modes: Manual input (enter pollutant readings) and City
sample (deterministic mock readings for a named city). Each analysis ranks the
reading against a reference set (fixed dataset rows by default, or random
samples) and shows the composite score, category, closest matches and the
prediction service's per-model predictions.
"""

import sys
from pathlib import Path
from typing import Optional

# Add project root to Python path to enable imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import pandas as pd
import streamlit as st

from airquality.air_quality_analyzer import AirQualityAnalyzer
from airquality.algorithms import Algorithm
from airquality.pollutant_reading import Pollutant, PollutantReading
from airquality.prediction_service import PredictionReport, PredictionService
from airquality.sample_data import REFERENCE_DATASET, generate_city_reading, generate_reference_samples


# Pollutants shown on the input form
FORM_POLLUTANTS = list(Pollutant)[:9]

REFERENCE_SAMPLE_COUNT = 10

REFERENCE_SETS = ["Dataset samples", "Random samples"]


# Initialize session state for analyzer, prediction service and reference samples
if "analyzer" not in st.session_state:
    st.session_state.analyzer = AirQualityAnalyzer()

if "prediction_service" not in st.session_state:
    st.session_state.prediction_service = PredictionService()

if "random_samples" not in st.session_state:
    st.session_state.random_samples = generate_reference_samples(REFERENCE_SAMPLE_COUNT)

if "prediction_report" not in st.session_state:
    st.session_state.prediction_report = None


def samples_to_frame(samples: list[PollutantReading]) -> pd.DataFrame:
    """
    Converts reference samples to a DataFrame with 1-based sample ids.

    Args:
        samples: Reference samples

    Returns:
        DataFrame indexed by sample id, one column per pollutant
    """
    frame = pd.DataFrame([sample.to_dict() for sample in samples])
    frame.index = np.arange(1, len(frame) + 1)
    frame.index.name = "id"
    return frame


def read_form(defaults: Optional[PollutantReading], form_key: str) -> PollutantReading:
    """
    Renders the pollutant input form and parses the entered values.

    Args:
        defaults: Reading used to pre-fill the form, if any
        form_key: Widget key prefix; a new prefix resets the form to the defaults

    Returns:
        PollutantReading built from the form text
    """
    form_data = {}
    columns = st.columns(3)
    for index, pollutant in enumerate(FORM_POLLUTANTS):
        default = ""
        if defaults is not None and pollutant.value in defaults:
            default = str(defaults[pollutant.value])
        with columns[index % 3]:
            form_data[pollutant.value] = st.text_input(
                f"{pollutant.label} ({pollutant.unit})",
                value=default,
                key=f"{form_key}_{pollutant.value}",
            )
    return PollutantReading.from_form(form_data)


def main() -> None:
    """
    Main function that runs the Streamlit dashboard.

    Sets up the page layout, collects the reading for the selected mode,
    runs the analyzer and renders the analysis and predictions.
    """
    st.set_page_config(page_title="AQI Analysis Dashboard", layout="wide")
    st.title("AQI Analysis Dashboard")

    # Mode and algorithm selection in sidebar
    mode = st.sidebar.selectbox(
        "Mode",
        ["Manual input", "City sample"],
        help="Choose mode: Manual input (enter readings) or City sample (mock data for a city)"
    )
    algorithm = st.sidebar.selectbox(
        "Algorithm",
        list(Algorithm),
        index=list(Algorithm).index(Algorithm.RANDOM_FOREST),
        format_func=lambda option: option.label,
    )
    st.sidebar.caption(algorithm.description)

    reference_set = st.sidebar.radio(
        "Reference set",
        REFERENCE_SETS,
        help="Dataset samples are fixed rows from the station dataset; random samples are synthetic",
    )
    if reference_set == "Random samples":
        if st.sidebar.button("New reference samples", help="Regenerate the random sample set"):
            st.session_state.random_samples = generate_reference_samples(REFERENCE_SAMPLE_COUNT)
            st.sidebar.success("Reference samples regenerated")
        references = st.session_state.random_samples
    else:
        references = list(REFERENCE_DATASET)

    enable_logging = st.sidebar.checkbox("Write analysis log", value=False)

    left_col, right_col = st.columns(2)

    with left_col:
        st.header("Input AQI Data")

        defaults = None
        form_key = "manual"
        if mode == "City sample":
            city = st.text_input("City", value="Hyderabad")
            if city.strip():
                defaults = generate_city_reading(city.strip())
                form_key = f"city_{city.strip().lower()}"
                st.caption(f"Loaded mock readings for {city.strip()}")

        reading = read_form(defaults, form_key)

        with st.expander("Reference samples"):
            st.dataframe(samples_to_frame(references), use_container_width=True)

    analyzer = st.session_state.analyzer
    result, explanation, log_entry = analyzer.analyze(
        reading,
        references,
        algorithm,
        enable_persistent_logging=enable_logging,
    )

    with right_col:
        st.header("Analysis Result")

        if result is None:
            st.error(explanation.text)
            return

        st.metric("AQI score", result.score)
        st.markdown(
            f"<span style='color:{result.category.color};font-weight:600'>"
            f"{result.category.label}</span>",
            unsafe_allow_html=True,
        )
        st.progress(result.score / 500)
        st.info(explanation.text)

        if result.best_match is not None:
            best_col, worst_col = st.columns(2)
            best_col.metric("Best match", f"#{result.best_match.id}", f"{result.best_match.similarity:.4f}")
            worst_col.metric("Worst match", f"#{result.worst_match.id}", f"{result.worst_match.similarity:.4f}")

            similarity_table = pd.DataFrame(
                [{"id": record.id, "similarity": round(record.similarity, 4)} for record in result.similarities]
            )
            st.dataframe(similarity_table, use_container_width=True, hide_index=True)

        st.subheader("Model Predictions")
        service = st.session_state.prediction_service
        if st.button("Get model predictions", help=f"Query the prediction service ({service.mode} mode)"):
            with st.spinner("Fetching predictions..."):
                st.session_state.prediction_report = (
                    reading.to_dict(),
                    service.get_predictions(reading, enhance_metrics=True),
                )

        if st.session_state.prediction_report is None:
            st.caption("Press the button to fetch per-model predictions for this reading.")
        else:
            predicted_for, report = st.session_state.prediction_report
            if predicted_for != reading.to_dict():
                st.warning("Readings changed since these predictions were fetched.")
            render_predictions(report)

        with st.expander("View detailed log entry"):
            st.json(log_entry.to_dict())


def render_predictions(report: PredictionReport) -> None:
    """Renders a prediction report's predictions and metrics tables."""
    st.caption(f"Source: {report.source}")
    st.dataframe(
        pd.DataFrame(
            [{"Model": p.model, "Predicted Efficiency Category": p.predicted_category} for p in report.predictions]
        ),
        use_container_width=True,
        hide_index=True,
    )
    if report.metrics:
        st.dataframe(pd.DataFrame(report.metrics).T, use_container_width=True)
        best = report.best_model()
        if best is not None:
            st.success(f"The best-performing model is '{best}'.")


if __name__ == "__main__":
    main()
