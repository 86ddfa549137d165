"""
Planning constants for cycle counts and replenishment.

Scoring tiers are (threshold, points) pairs checked from the top down;
the first threshold the value reaches wins.
"""

from decimal import Decimal

# =============================================================================
# WINDOWS & CONVERSIONS
# =============================================================================

# Trailing window for correction-like events, inclusive lower bound
CORRECTION_WINDOW_DAYS = 30

# Liquid items are tracked in gallons; on-hand "units" are fluid ounces
UNITS_PER_GALLON = 128

# Moving-average demand uses at most this many recent daily samples
DEMAND_SAMPLE_LIMIT = 14

# =============================================================================
# LABELS
# =============================================================================

UNNAMED_ITEM_LABEL = "Unnamed Item"
NO_LOCATION_LABEL = "No Location"
NO_LOCATION_ZONE_KEY = "no-location"
UNASSIGNED_SUPPLIER_LABEL = "Unassigned Supplier"
ROUTINE_REASON = "Routine verification opportunity."

# Reasons shown per candidate
MAX_REASONS = 3

# =============================================================================
# SCORE TIERS
# =============================================================================

# Days since last count -> points
COUNT_AGE_TIERS = ((21, 28), (14, 22), (7, 15), (3, 8))

# Units expected to have moved since the last count (demand x days)
DEMAND_EXPOSURE_TIERS = ((Decimal("500"), 12), (Decimal("100"), 8), (Decimal("25"), 4))

# Supplier lead time in days -> points
LEAD_TIME_TIERS = ((30, 6), (14, 4), (7, 2))

# Days-of-cover risk (needs both demand and lead time)
OUT_OF_STOCK_POINTS = 24
URGENT_COVER_POINTS = 18
AT_RISK_COVER_POINTS = 11
URGENT_COVER_RATIO = Decimal("0.5")  # urgent when cover <= lead x 0.5

# Fixed penalties (not mode-weighted)
MISSING_PLANNING_INPUTS_POINTS = 10
MISSING_BARCODE_POINTS = 7
NO_LOCATION_POINTS = 6

# Corrections in window -> points
CORRECTION_TIERS = ((3, 12), (1, 6))

# =============================================================================
# BAND THRESHOLDS
# =============================================================================

CRITICAL_THRESHOLD = 58
HIGH_THRESHOLD = 40
MEDIUM_THRESHOLD = 24
LOW_THRESHOLD = 12  # Below this the item is routine

# =============================================================================
# COUNT EFFORT (seconds)
# =============================================================================

COUNT_BASE_SECONDS = 60
COUNT_SECONDS_PER_STEP = 4
COUNT_UNITS_PER_STEP = 10
COUNT_UNIT_SECONDS_CAP = 90
LIQUID_EXTRA_SECONDS = 45
MISSING_BARCODE_EXTRA_SECONDS = 16
NO_LOCATION_EXTRA_SECONDS = 14

# =============================================================================
# REPLENISHMENT
# =============================================================================

# Auto-reorder velocity blend when both moving and baseline demand exist
MOVING_DEMAND_WEIGHT = Decimal("0.65")
BASELINE_DEMAND_WEIGHT = Decimal("0.35")

# Review window = lead x 1.5, clamped to [7, 21] days
REVIEW_WINDOW_FACTOR = Decimal("1.5")
REVIEW_WINDOW_MIN_DAYS = Decimal("7")
REVIEW_WINDOW_MAX_DAYS = Decimal("21")

# Suggestion confidence sample thresholds
HIGH_CONFIDENCE_SAMPLES = 10
MEDIUM_CONFIDENCE_SAMPLES = 4
