# visualization/plot_generator.py
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots
import folium
from folium.plugins import MarkerCluster, HeatMap
import pandas as pd
from typing import List, Dict, Any, Iterable, Tuple
import logging

from config import config
from data.models import FloatReading
from data.float_generator import floats_to_dataframe
from utils.helpers import ColorScale, OceanHelpers

logger = logging.getLogger(__name__)

MAP_TYPES = ('marker', 'cluster', 'heatmap')


class OceanPlotGenerator:
    def __init__(self):
        self.template = config.get('visualization.default_theme', 'plotly_white')
        self.color_scale = config.get('visualization.color_palette', 'Viridis')
        self.map_tiles = config.get('visualization.map_tiles', 'OpenStreetMap')
        self.max_markers = int(config.get_float('visualization.max_markers', 500))

        self.status_colors = {
            'active': '#10b981',
            'inactive': '#f97316'
        }

    def _to_frame(self, floats) -> pd.DataFrame:
        if isinstance(floats, pd.DataFrame):
            return floats
        return floats_to_dataframe(floats)

    def create_float_map(self, floats: Iterable[FloatReading], map_type: str = 'marker') -> folium.Map:
        """Folium map of float positions coloured by temperature"""
        df = self._to_frame(floats)
        if df.empty:
            return self._create_empty_map()

        if map_type not in MAP_TYPES:
            logger.warning(f"Unknown map type {map_type!r}, using markers")
            map_type = 'marker'

        m = folium.Map(
            location=[df['latitude'].mean(), df['longitude'].mean()],
            zoom_start=3,
            tiles=self.map_tiles,
            control_scale=True
        )

        if map_type == 'heatmap' and len(df) > 10:
            self._add_heatmap_layer(m, df)
        elif map_type == 'cluster':
            self._add_cluster_layer(m, df)
        else:
            self._add_markers(m, df.head(self.max_markers))

        self._add_map_controls(m)
        return m

    def _add_markers(self, map_obj: folium.Map, df: pd.DataFrame):
        for _, row in df.iterrows():
            folium.CircleMarker(
                [row['latitude'], row['longitude']],
                radius=6 if row['status'] == 'active' else 4,
                color=ColorScale.temperature_color(row['temperature']),
                fill=True,
                fill_opacity=0.8 if row['status'] == 'active' else 0.4,
                popup=folium.Popup(self._create_popup(row), max_width=300),
                tooltip=f"Float {row['id']}"
            ).add_to(map_obj)

    def _add_heatmap_layer(self, map_obj: folium.Map, df: pd.DataFrame):
        """Heat weighted by temperature, scaled to the visible range"""
        span = (df['temperature'].max() - df['temperature'].min()) or 1.0
        heat_data = [
            [row['latitude'], row['longitude'], (row['temperature'] - df['temperature'].min()) / span]
            for _, row in df.iterrows()
        ]
        HeatMap(heat_data, radius=15, blur=10,
                gradient={0.4: 'blue', 0.6: 'cyan', 0.7: 'lime', 0.8: 'yellow', 1.0: 'red'}).add_to(map_obj)

    def _add_cluster_layer(self, map_obj: folium.Map, df: pd.DataFrame):
        marker_cluster = MarkerCluster(name='ARGO floats').add_to(map_obj)

        for _, row in df.iterrows():
            icon = folium.Icon(
                icon='tint',
                icon_color='white',
                color=ColorScale.temperature_color(row['temperature']),
                prefix='fa'
            )
            folium.Marker(
                [row['latitude'], row['longitude']],
                popup=folium.Popup(self._create_popup(row), max_width=300),
                icon=icon
            ).add_to(marker_cluster)

    def _create_popup(self, row) -> str:
        popup_parts = [
            f"<b>Float ID:</b> {row['id']}",
            f"<b>Status:</b> {str(row['status']).title()}",
            f"<b>Date:</b> {row['date']}",
            f"<b>Location:</b> {OceanHelpers.format_coordinates(row['latitude'], row['longitude'])}",
            f"<b>Depth:</b> {row['depth']:.0f} m",
            f"<b>Temperature:</b> {row['temperature']:.2f} °C",
            f"<b>Salinity:</b> {row['salinity']:.2f} PSU"
        ]
        return "<br>".join(popup_parts)

    def _add_map_controls(self, map_obj: folium.Map):
        folium.LayerControl().add_to(map_obj)
        folium.LatLngPopup().add_to(map_obj)

    def _create_empty_map(self, center: Tuple[float, float] = (0, 0)) -> folium.Map:
        """Create empty map with informative message"""
        m = folium.Map(location=center, zoom_start=2, tiles=self.map_tiles)
        folium.Marker(
            center,
            icon=folium.DivIcon(html='<div style="color: red; font-size: 16px;">No data available</div>')
        ).add_to(m)
        return m

    def create_temperature_depth_plot(self, floats) -> go.Figure:
        df = self._to_frame(floats)
        if df.empty:
            return self._create_empty_plot("No float data available")

        fig = px.scatter(
            df, x='temperature', y='depth', color='salinity',
            color_continuous_scale=self.color_scale,
            hover_data=['id', 'status', 'date'],
            labels={'temperature': 'Temperature (°C)', 'depth': 'Depth (m)', 'salinity': 'Salinity (PSU)'},
            template=self.template
        )
        fig.update_yaxes(autorange='reversed')
        fig.update_layout(title="Temperature vs Depth", height=450)
        return fig

    def create_ts_diagram(self, floats) -> go.Figure:
        """Temperature-salinity diagram, one colour per float status"""
        df = self._to_frame(floats)
        if df.empty:
            return self._create_empty_plot("No float data available")

        fig = px.scatter(
            df, x='salinity', y='temperature', color='status',
            color_discrete_map=self.status_colors,
            hover_data=['id', 'depth'],
            labels={'salinity': 'Salinity (PSU)', 'temperature': 'Temperature (°C)'},
            template=self.template
        )
        fig.update_layout(title="T-S Diagram", height=450)
        return fig

    def create_status_breakdown(self, floats) -> go.Figure:
        df = self._to_frame(floats)
        if df.empty:
            return self._create_empty_plot("No float data available")

        counts = df['status'].value_counts()
        fig = go.Figure(go.Pie(
            labels=[s.title() for s in counts.index],
            values=counts.values,
            hole=0.45,
            marker=dict(colors=[self.status_colors.get(s, 'gray') for s in counts.index])
        ))
        fig.update_layout(title="Float Status", height=350, template=self.template)
        return fig

    def create_overview_dashboard(self, floats) -> go.Figure:
        """Depth and value distributions for the current float set"""
        df = self._to_frame(floats)
        if df.empty:
            return self._create_empty_plot("No data available for dashboard")

        fig = make_subplots(
            rows=1, cols=3,
            subplot_titles=('Temperature Distribution', 'Salinity Distribution', 'Depth Distribution')
        )
        fig.add_trace(go.Histogram(x=df['temperature'], nbinsx=30, name='Temperature',
                                   marker_color='#f97316'), row=1, col=1)
        fig.add_trace(go.Histogram(x=df['salinity'], nbinsx=30, name='Salinity',
                                   marker_color='#06b6d4'), row=1, col=2)
        fig.add_trace(go.Histogram(x=df['depth'], nbinsx=30, name='Depth',
                                   marker_color='#3b82f6'), row=1, col=3)

        fig.update_xaxes(title_text="°C", row=1, col=1)
        fig.update_xaxes(title_text="PSU", row=1, col=2)
        fig.update_xaxes(title_text="m", row=1, col=3)
        fig.update_layout(height=350, showlegend=False, template=self.template)
        return fig

    def create_trend_chart(self, trend: pd.DataFrame) -> go.Figure:
        """Monthly temperature with confidence band and salinity on a secondary axis"""
        if trend is None or trend.empty:
            return self._create_empty_plot("No trend data available")

        fig = make_subplots(specs=[[{"secondary_y": True}]])
        fig.add_trace(go.Scatter(
            x=trend['month'], y=trend['temp_upper'], mode='lines',
            line=dict(width=0), showlegend=False, hoverinfo='skip'
        ), secondary_y=False)
        fig.add_trace(go.Scatter(
            x=trend['month'], y=trend['temp_lower'], mode='lines',
            line=dict(width=0), fill='tonexty', fillcolor='rgba(249, 115, 22, 0.2)',
            name='Temperature range'
        ), secondary_y=False)
        fig.add_trace(go.Scatter(
            x=trend['month'], y=trend['temperature'], mode='lines+markers',
            name='Temperature (°C)', line=dict(color='#f97316', width=3)
        ), secondary_y=False)
        fig.add_trace(go.Scatter(
            x=trend['month'], y=trend['salinity'], mode='lines+markers',
            name='Salinity (PSU)', line=dict(color='#06b6d4', width=2, dash='dot')
        ), secondary_y=True)

        fig.update_yaxes(title_text="Temperature (°C)", secondary_y=False)
        fig.update_yaxes(title_text="Salinity (PSU)", secondary_y=True)
        fig.update_layout(title="Ocean Trends", height=450, template=self.template)
        return fig

    def create_chat_visualization(self, spec: Dict[str, Any]) -> go.Figure:
        """Render a chart, map or table spec attached to an assistant message"""
        kind = spec.get('type')
        data = spec.get('data')
        title = spec.get('title', '')

        if kind == 'chart' and data:
            df = pd.DataFrame(data)
            fig = px.line(df, x='date', y='value', markers=True, template=self.template,
                          labels={'value': f"{spec.get('variable', 'value')} ({spec.get('unit', '')})".strip()})
            fig.update_layout(title=title, height=350)
            return fig

        if kind == 'map' and data and data.get('floats'):
            df = pd.DataFrame(data['floats'])
            fig = px.scatter_geo(df, lat='lat', lon='lon', color='temperature',
                                 hover_name='id', color_continuous_scale=self.color_scale,
                                 template=self.template)
            fig.update_layout(title=title, height=400)
            return fig

        if kind == 'table' and data and data.get('rows'):
            columns = list(zip(*data['rows']))
            fig = go.Figure(go.Table(
                header=dict(values=data['headers'], fill_color='#0ea5e9', font=dict(color='white')),
                cells=dict(values=columns)
            ))
            fig.update_layout(title=title, height=250)
            return fig

        return self._create_empty_plot(f"Nothing to display for {title or kind}")

    def _create_empty_plot(self, message: str = "No data available") -> go.Figure:
        """Create empty plot with message"""
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper", yref="paper",
            x=0.5, y=0.5, xanchor='center', yanchor='middle',
            showarrow=False,
            font=dict(size=16, color="red")
        )
        fig.update_layout(
            plot_bgcolor='white',
            height=400,
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False)
        )
        return fig

    def export_plot(self, fig, filename: str, format: str = 'html', width: int = 1200, height: int = 800):
        """Export plot to various formats"""
        try:
            if format.lower() == 'html':
                fig.write_html(f"{filename}.html", config={'responsive': True})
            elif format.lower() == 'png':
                fig.write_image(f"{filename}.png", width=width, height=height)
            elif format.lower() == 'pdf':
                fig.write_image(f"{filename}.pdf", width=width, height=height)
            elif format.lower() == 'json':
                fig.write_json(f"{filename}.json")
            else:
                raise ValueError(f"Unsupported format: {format}")

            logger.info(f"Plot exported successfully: {filename}.{format}")
            return True

        except Exception as e:
            logger.error(f"Error exporting plot: {e}")
            return False
