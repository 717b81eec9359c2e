"""
constants.py – Shared labels, mode sets, bounds, and file names.
"""

# ── Transport modes ───────────────────────────────────────────
MODE_CAR_GAS = "car_gas"
MODE_RIDESHARE = "rideshare"
MODE_BUS = "bus"
MODE_SUBWAY_METRO = "subway_metro"
MODE_TRAIN_COMMUTER = "train_commuter"
MODE_BIKE = "bike"
MODE_WALK = "walk"

TRANSPORT_MODES = (
    MODE_CAR_GAS,
    MODE_RIDESHARE,
    MODE_BUS,
    MODE_SUBWAY_METRO,
    MODE_TRAIN_COMMUTER,
    MODE_BIKE,
    MODE_WALK,
)

MODE_LABELS = {
    MODE_CAR_GAS: "Car (Gas)",
    MODE_RIDESHARE: "Rideshare",
    MODE_BUS: "Bus",
    MODE_SUBWAY_METRO: "Subway/Metro",
    MODE_TRAIN_COMMUTER: "Train",
    MODE_BIKE: "Bike",
    MODE_WALK: "Walk",
}

# ── Distance units ────────────────────────────────────────────
UNIT_MILES = "mi"
UNIT_KM = "km"
ALLOWED_UNITS = {UNIT_MILES, UNIT_KM}
DEFAULT_UNIT = UNIT_MILES

# ── Input sanity bounds ───────────────────────────────────────
MAX_DISTANCE = 10_000.0
MAX_EMISSION_FACTOR = 10.0      # kg CO₂e per mile
MAX_OCCUPANCY = 10.0

# ── Rounding ──────────────────────────────────────────────────
KG_DECIMALS = 3
DISTANCE_DECIMALS = 1

# ── Achievement ids ───────────────────────────────────────────
BADGE_FIRST_LOG = "first_log"
BADGE_STREAK_3 = "streak_3"
BADGE_STREAK_7 = "streak_7"
BADGE_SAVINGS_5KG = "savings_5kg"
BADGE_SAVINGS_25KG = "savings_25kg"

# ── Metrics windows (days) ────────────────────────────────────
WEEK_DAYS = 7
CHART_DAYS = 14

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# ── Store file names ──────────────────────────────────────────
STORE_TRIPS = "carbon-tracker-trips.json"
STORE_SETTINGS = "carbon-tracker-emission-settings.json"
STORE_BADGES = "carbon-tracker-badges.json"
CORRUPT_SUFFIX = ".corrupt"

# ── Export ────────────────────────────────────────────────────
EXPORT_HEADERS = [
    "Date",
    "Transport Mode",
    "Distance",
    "Unit",
    "Emissions (kg CO₂e)",
    "Savings (kg CO₂e)",
    "Notes",
]
EXPORT_EMPTY_MESSAGE = "No data to export"
EXPORT_FILENAME_TEMPLATE = "carbon-tracker-export-{date}.csv"
