# streamlit_app/main.py

import streamlit as st
import numpy as np
from streamlit_folium import folium_static
from datetime import datetime
from pathlib import Path
import sys
import logging

sys.path.append(str(Path(__file__).parent.parent / 'src'))

from config import config
from data.float_generator import DataFilters, empty_ocean_data, float_generator, floats_to_dataframe
from data.models import ChatMessage, MessageRole
from data.regions import list_regions
from nlp.chat_engine import ChatEngine
from nlp.insights import generate_insight_report, generate_trend_series, summarize_floats
from nlp.llm_client import set_api_key
from nlp.support_bot import handle_complaint
from utils.helpers import DataExporter
from visualization.plot_generator import OceanPlotGenerator

logger = logging.getLogger(__name__)

# Configure page
st.set_page_config(
    page_title="FloatChat Ocean Analytics",
    page_icon="🌊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for styling
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 1rem;
        font-weight: bold;
    }
    .insight-card {
        background-color: #f0f2f6;
        padding: 1rem;
        border-radius: 10px;
        margin: 0.5rem 0;
        border-left: 4px solid #1f77b4;
    }
    .stButton button {
        width: 100%;
        border-radius: 8px;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)

LANGUAGES = {'en': 'English', 'hi': 'हिन्दी', 'ta': 'தமிழ்'}
CHANGE_ICONS = {'up': '📈', 'down': '📉', 'neutral': '➖'}
EXAMPLE_QUERIES = [
    "What was the average temperature in the Arabian Sea in 2023?",
    "Show me salinity profiles in the Bay of Bengal",
    "Maximum temperature in the Pacific Ocean in summer",
    "Compare oxygen levels at surface in the Indian Ocean",
    "Show me salinity",
    "Tell me about ARGO floats"
]


class FloatChatDashboard:
    def __init__(self):
        self.chat_engine = ChatEngine()
        self.plot_generator = OceanPlotGenerator()
        self.initialize_state()

    def initialize_state(self):
        if 'messages' not in st.session_state:
            st.session_state.messages = [
                ChatMessage(role=MessageRole.ASSISTANT.value,
                            content="Hello! I'm FloatChat AI. Ask me about ARGO ocean data.")
            ]
        if 'support_messages' not in st.session_state:
            st.session_state.support_messages = []
        if 'insight_report' not in st.session_state:
            st.session_state.insight_report = None

    def render_sidebar(self):
        """Render the sidebar with navigation and filters"""
        defaults = DataFilters.from_settings()

        with st.sidebar:
            st.markdown('<div class="main-header">🌊 FloatChat</div>', unsafe_allow_html=True)

            st.markdown("### Navigation")
            page = st.radio("Page", ["Dashboard", "FloatChat AI", "Insights", "Support"],
                            label_visibility="collapsed")

            st.markdown("---")
            st.markdown("### Data Filters")

            regions = list_regions()
            region = st.selectbox("Region", regions, index=regions.index(defaults.region)
                                  if defaults.region in regions else 0)

            col1, col2 = st.columns(2)
            with col1:
                start_date = st.date_input("Start Date", defaults.start_date)
            with col2:
                end_date = st.date_input("End Date", defaults.end_date)

            temp_range = st.slider("Temperature (°C)", -5.0, 40.0, (float(defaults.temp_min), float(defaults.temp_max)))
            salinity_range = st.slider("Salinity (PSU)", 0.0, 45.0,
                                       (float(defaults.salinity_min), float(defaults.salinity_max)))
            depth_range = st.slider("Depth (m)", 0.0, 6000.0, (float(defaults.depth_min), float(defaults.depth_max)))
            statuses = st.multiselect("Float Status", ['active', 'inactive'], default=list(defaults.statuses),
                                      format_func=str.title)

            st.markdown("---")
            st.markdown("### Assistant")
            language = st.selectbox("Language", list(LANGUAGES), format_func=LANGUAGES.get,
                                    index=list(LANGUAGES).index(config.get('chat.default_language', 'en')))
            api_key = st.text_input("OpenAI API key (optional)", type="password")
            if api_key:
                set_api_key(api_key)

            filters = DataFilters(
                region=region,
                start_date=start_date,
                end_date=end_date,
                temp_min=temp_range[0], temp_max=temp_range[1],
                salinity_min=salinity_range[0], salinity_max=salinity_range[1],
                depth_min=depth_range[0], depth_max=depth_range[1],
                statuses=tuple(statuses)
            )

            st.download_button(
                label="📥 Export Filters",
                data=DataExporter.filters_to_json(filters),
                file_name="floatchat_filters.json",
                mime="application/json"
            )

            return page, filters, language

    def load_data(self, filters: DataFilters):
        try:
            return float_generator.get_argo_data(filters)
        except Exception:
            logger.exception(f"Float data generation failed for {filters.region}")
            st.error("Could not generate float data; showing an empty summary.")
            return empty_ocean_data(filters)

    def render_dashboard(self, filters: DataFilters):
        st.markdown('<div class="main-header">🌊 FloatChat Ocean Analytics</div>', unsafe_allow_html=True)
        ocean_data = self.load_data(filters)
        summary = ocean_data.summary

        col1, col2, col3, col4, col5 = st.columns(5)
        col1.metric("Total Floats", f"{summary.total_floats:,}")
        col2.metric("Active Floats", f"{summary.active_floats:,}")
        col3.metric("Avg Temperature", f"{summary.avg_temperature:.2f}°C")
        col4.metric("Avg Salinity", f"{summary.avg_salinity:.2f} PSU")
        col5.metric("Data Points", f"{summary.data_points:,}")

        if ocean_data.is_empty:
            st.markdown("---")
            st.warning("### No Data Available\nNo floats match the current filters. "
                       "Widen the ranges or pick another region.")
            if st.button("🔄 Retry"):
                float_generator.clear_cache()
                st.rerun()
            return

        st.markdown("---")
        st.markdown("### ARGO Float Locations")
        map_type = st.radio("Map mode", ['marker', 'cluster', 'heatmap'], horizontal=True, format_func=str.title)
        folium_static(self.plot_generator.create_float_map(ocean_data.floats, map_type), width=1200, height=500)

        df = floats_to_dataframe(ocean_data.floats)

        col1, col2 = st.columns(2)
        with col1:
            st.plotly_chart(self.plot_generator.create_temperature_depth_plot(df), use_container_width=True)
        with col2:
            st.plotly_chart(self.plot_generator.create_ts_diagram(df), use_container_width=True)

        col1, col2 = st.columns([1, 2])
        with col1:
            st.plotly_chart(self.plot_generator.create_status_breakdown(df), use_container_width=True)
        with col2:
            st.markdown("### Insights")
            for card in summarize_floats(ocean_data.floats):
                st.markdown(
                    f'<div class="insight-card"><b>{CHANGE_ICONS[card["change"]]} {card["title"]}</b>: '
                    f'{card["value"]}<br><small>{card["description"]}</small></div>',
                    unsafe_allow_html=True
                )

        st.plotly_chart(self.plot_generator.create_overview_dashboard(df), use_container_width=True)

        st.markdown("### Float Data")
        st.dataframe(df, use_container_width=True, height=400)

        col1, col2 = st.columns(2)
        with col1:
            st.download_button("📥 Download CSV", DataExporter.floats_to_csv(ocean_data.floats),
                               file_name=f"argo_floats_{datetime.now():%Y%m%d}.csv", mime="text/csv")
        with col2:
            st.download_button("📥 Download JSON", DataExporter.floats_to_json(ocean_data.floats, filters),
                               file_name=f"argo_floats_{datetime.now():%Y%m%d}.json", mime="application/json")

    def _render_message(self, message: ChatMessage):
        with st.chat_message(message.role):
            st.markdown(message.content)
            meta = message.metadata
            if not meta:
                return
            st.caption(f"Intent: {meta['intent']} · Confidence: {meta['confidence']}% · "
                       f"Data quality: {meta['data_quality']} · "
                       f"~{meta['source_info']['float_count']:,} floats")
            for spec in meta.get('visualizations', []):
                st.plotly_chart(self.plot_generator.create_chat_visualization(spec),
                                use_container_width=True, key=f"{message.id}-{spec['type']}")

    def render_chat(self, language: str):
        st.markdown("### 🤖 FloatChat AI")
        st.markdown("Ask about temperature, salinity, oxygen and more by region, time and depth.")

        for message in st.session_state.messages:
            self._render_message(message)

        prompt = st.chat_input("What would you like to know about the ocean data?")

        st.markdown("### Try asking:")
        cols = st.columns(3)
        for i, query in enumerate(EXAMPLE_QUERIES):
            with cols[i % 3]:
                if st.button(query, key=f"example-{i}"):
                    prompt = query

        if prompt:
            st.session_state.messages = self.chat_engine.send_message(
                st.session_state.messages, prompt, language)
            st.rerun()

        st.download_button(
            label="📥 Export Conversation",
            data=DataExporter.transcript_to_text(st.session_state.messages),
            file_name=f"floatchat_conversation_{datetime.now():%Y%m%d_%H%M}.txt",
            mime="text/plain"
        )

    def render_insights(self, filters: DataFilters):
        st.markdown("### 🔬 Data Insights")
        ocean_data = self.load_data(filters)

        question = st.text_input("Ask about this dataset", "Analyze temperature trends")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Generate Insight Report"):
                st.session_state.insight_report = generate_insight_report(question, ocean_data)
        with col2:
            if st.button("Quick Answer"):
                st.session_state.insight_report = self.chat_engine.general_reply(question)

        if st.session_state.insight_report:
            st.markdown(st.session_state.insight_report)

        st.markdown("---")
        st.plotly_chart(self.plot_generator.create_trend_chart(generate_trend_series(np.random.default_rng())),
                        use_container_width=True)

    def render_support(self):
        st.markdown("### 🎧 Support")
        st.markdown("Describe the problem you ran into and we'll open a ticket.")

        for entry in st.session_state.support_messages:
            with st.chat_message("user"):
                st.markdown(entry['message'])
            with st.chat_message("assistant"):
                st.markdown(entry['response'])
                st.caption(f"Ticket {entry['ticket_id']} · {entry['category']} · priority {entry['priority']} · "
                           f"expected resolution {entry['estimated_resolution']}")

        complaint = st.chat_input("Describe your issue")
        if complaint:
            result = handle_complaint(complaint, user_id='dashboard-user', platform='streamlit')
            st.session_state.support_messages.append({'message': complaint, **result})
            st.rerun()

    def run(self):
        """Main application runner"""
        page, filters, language = self.render_sidebar()

        if page == "Dashboard":
            self.render_dashboard(filters)
        elif page == "FloatChat AI":
            self.render_chat(language)
        elif page == "Insights":
            self.render_insights(filters)
        elif page == "Support":
            self.render_support()


# Run the application
if __name__ == "__main__":
    dashboard = FloatChatDashboard()
    dashboard.run()
