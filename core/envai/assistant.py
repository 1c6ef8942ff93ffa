"""
Assistant Context

Builds the text context and prompt sent to the text-generation service. The
service itself is external; nothing here affects the computed metrics.
"""

import json
from typing import Any

from .models import Reading

RAG_PROMPT_TEMPLATE = """You are an AI assistant for a smart thermostat system. Answer questions based only on the provided context data.

Context Data for {time_range}:
{context}

User Question: {question}

Instructions:
- Answer based only on the provided context data
- Return your response in clean, semantic HTML format
- Use the following HTML structure and CSS classes:
  * <h3 class="ai-section-title"> for main section headers
  * <div class="ai-metric"> for important metrics and numbers
  * <ul class="ai-list"> and <li> for lists
  * <strong> for emphasis on key points
  * <span class="ai-value"> for numerical values
  * <div class="ai-recommendation"> for recommendations or suggestions
  * <p class="ai-summary"> for summary paragraphs
- Be specific and include relevant numbers from the data
- If the data doesn't contain information to answer the question, say so clearly
- Keep responses concise but informative
- Use temperature in Fahrenheit and energy in kWh
- Do not include any markdown formatting
- Ensure all HTML tags are properly closed

Answer:"""

NO_DATA_RESPONSE = """<div class="ai-no-data">
  <h3 class="ai-section-title">No Data Available</h3>
  <p class="ai-summary">I don't have enough data to answer your question. Please check if the system is collecting data properly.</p>
</div>"""


def _compact(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"))


def build_context(
    latest: Reading,
    dashboard: dict[str, Any],
    health: dict[str, Any],
    time_range: str
) -> str:
    """Structured text summary of current status, statistics and health."""
    summary = dashboard["summary"]
    charts = dashboard["charts"]
    components = health["components"]

    lines = [
        "CURRENT STATUS:",
        f"- Current Temperature: {latest.current_temp}°F",
        f"- Target Temperature: {latest.target_temp}°F",
        f"- System Mode: {latest.mode}",
        f"- Occupancy: {'Occupied' if latest.occupancy else 'Vacant'}",
        f"- Humidity: {latest.humidity}%",
        f"- Last Updated: {latest.timestamp.isoformat()}",
        "",
        f"SUMMARY STATISTICS ({time_range}):",
        f"- Average Temperature: {summary['avgTemp']}°F",
        f"- Total Energy Usage: {summary['totalEnergy']} kWh",
        f"- Total Cost: ${summary['totalCost']}",
        f"- Occupancy Rate: {summary['occupancyRate']}%",
        f"- Data Points: {dashboard['metadata']['dataPoints']}",
        "",
        "SYSTEM HEALTH:",
        f"- Overall Status: {health['overall']}",
        f"- Temperature Health: {components['temperature']['status']}",
        f"- Energy Efficiency: {components['energy']['status']}",
        f"- Humidity Status: {components['humidity']['status']}",
        f"- Current Efficiency: {components['energy']['efficiency']}%",
        f"- Daily Cost: ${components['energy']['dailyCost']}",
        "",
        "ENERGY DATA:",
        f"- Weekly Costs: {_compact(charts['weeklyCostsChart'])}",
        f"- Energy Breakdown: {_compact(charts['energyBreakdownChart'])}",
        "",
        "TEMPERATURE PATTERNS:",
        f"- Temperature Chart Data: {_compact(charts['temperatureChart'])}",
        "",
        "USAGE PATTERNS:",
        f"- Heatmap Data: {_compact(charts['heatmapChart'])}",
        "",
        "RECOMMENDATIONS:",
        *[f"- {text}" for text in health["recommendations"]],
    ]
    return "\n".join(lines)


def build_prompt(question: str, context: str, time_range: str) -> str:
    return RAG_PROMPT_TEMPLATE.format(time_range=time_range, context=context, question=question)
