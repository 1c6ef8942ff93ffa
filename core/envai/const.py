"""
Envai Constants

Fixed domain values shared by the metrics engine and the dashboard.
"""

# Electricity price ($/kWh). Default for DashboardSettings.energy_rate;
# cost functions take the configured rate as an argument.
ENERGY_RATE = 0.12

# Time range tokens -> window length in hours
TIME_RANGE_HOURS = {
    "24h": 24,
    "7d": 168,  # 7 days * 24 hours
    "30d": 720,  # 30 days * 24 hours
}
VALID_TIME_RANGES = ("24h", "7d", "30d", "all")

# Window strategies
WINDOW_ELAPSED = "elapsed"
WINDOW_POSITIONAL = "positional"
WINDOW_STRATEGIES = (WINDOW_ELAPSED, WINDOW_POSITIONAL)

# KPI "daily" slice (positional, hourly cadence)
DAILY_WINDOW_SIZE = 24

# Operating modes
MODE_HEATING = "heating"
MODE_COOLING = "cooling"
MODE_OFF = "off"

# Sunday-first, matching the heatmap day index (0 = Sunday)
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
HOUR_LABELS = [f"{hour:02d}:00" for hour in range(24)]

# Comfort bands
HUMIDITY_OPTIMAL_MIN = 40
HUMIDITY_OPTIMAL_MAX = 60
TEMP_TOLERANCE = 2.0  # °F, |current - target| below this is "good"

# Efficiency buckets (score > threshold)
EFFICIENCY_GOOD_THRESHOLD = 70
EFFICIENCY_FAIR_THRESHOLD = 40

# Health labels
STATUS_GOOD = "good"
STATUS_WARNING = "warning"
STATUS_FAIR = "fair"
STATUS_POOR = "poor"
OVERALL_HEALTHY = "healthy"
OVERALL_NEEDS_ATTENTION = "needs_attention"

# Recommendations, emitted in this order
RECOMMEND_TEMP_ABOVE = (
    "Current temperature is significantly above target. "
    "Consider adjusting thermostat or checking for heat sources."
)
RECOMMEND_TEMP_BELOW = (
    "Current temperature is significantly below target. "
    "System may need maintenance or insulation check."
)
RECOMMEND_ENERGY_POOR = (
    "Energy efficiency is low. "
    "Consider scheduling maintenance or adjusting temperature settings."
)
RECOMMEND_HUMIDITY_LOW = "Humidity is too low. Consider using a humidifier."
RECOMMEND_HUMIDITY_HIGH = (
    "Humidity is too high. Consider using a dehumidifier or improving ventilation."
)
RECOMMEND_OPTIMAL = "System is operating optimally. No immediate actions needed."

TEMP_UNIT = "°F"
