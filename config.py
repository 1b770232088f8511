"""
Global configuration and constants for the Chemical Release Dispersion Core.
"""

# --- Physical Constants ---
GRAVITY = 9.81                 # m/s^2
AIR_MOLAR_MASS = 28.97         # g/mol (dry air average)
AIR_GAS_CONSTANT = 287.0       # J/(kg·K), specific gas constant for dry air
UNIVERSAL_GAS_CONSTANT = 8314.0  # J/(kmol·K)
MOLAR_VOLUME_L = 24.45         # L/mol at 25 °C, 1 atm (ppm <-> mg/m^3)
KELVIN_OFFSET = 273.15

# --- Unit Convention ---
# Release rates are kg/s, so plume equations yield kg/m^3; results are reported in mg/m^3.
KG_TO_MG = 1e6
CONCENTRATION_UNITS = "mg/m3"

# --- Release Defaults ---
DEFAULT_RELEASE_RATE = 0.1          # kg/s, used when neither rate nor mass is supplied
DEFAULT_RELEASE_DURATION_S = 3600.0  # s, spreads total mass when no end time is known
DEFAULT_SURFACE_ROUGHNESS_M = 0.1   # m (open country)
URBAN_ROUGHNESS_THRESHOLD_M = 0.20  # m, roughness at or above this is treated as urban

# --- Weather Defaults ---
DEFAULT_STABILITY_CLASS = "D"    # Neutral stability
DEFAULT_CLOUD_COVER_PCT = 50.0   # Partial cover when the observation has none
DAYTIME_START_HOUR = 6
DAYTIME_END_HOUR = 18
WIND_REFERENCE_HEIGHT_M = 10.0   # Anemometer height for the power-law profile
WIND_PROFILE_MIN_HEIGHT_M = 1.0  # Heights below this are evaluated at this height

# --- Stability Classification ---
OVERCAST_CLOUD_COVER_PCT = 50.0  # Above this, stability is neutral day or night
SOLAR_ALTITUDE_MIN_DEG = 0.1     # Sun at or below this altitude gives zero insolation
SOLAR_CONSTANT_W_M2 = 1100.0
CLOUD_ATTENUATION = 0.71

# --- Model Routing ---
HEAVY_GAS_DENSITY_RATIO = 1.2    # MW / 28.97 above this uses the heavy-gas model

# --- Gaussian Plume ---
REFLECTION_TERMS = 5             # Mixing-lid reflection series runs n = -5..5
PLUME_RISE_DISTANCE_M = 1000.0    # Downwind distance at which buoyant rise is evaluated
PLUME_RISE_MIN_WIND_M_S = 1.0     # Wind speeds below this are raised to it for plume rise
DEFAULT_EXIT_VELOCITY_M_S = 1.0   # Vent exit velocity for momentum rise

# --- Heavy Gas ---
SOURCE_BLANKET_THICKNESS_M = 0.1  # Thickness of the initial dense-gas blanket
INITIAL_CLOUD_HEIGHT_M = 1.0      # Initial cloud height at the source
ENTRAINMENT_COEFFICIENT = 0.1     # Dilution per km of travel
WIND_SHEAR_SPREAD_RATE = 0.1      # Lateral spreading from wind shear, m per m travelled
GAUSSIAN_EDGE_FACTOR = 2.146      # Width-to-sigma factor for cloud edges
CRITICAL_RICHARDSON = 1.0

# --- Risk Tiers ---
DEFAULT_TOXICITY_THRESHOLD_MG_M3 = 1000.0  # Life-threatening level when the chemical has none
DISABLING_FRACTION = 0.1
DISCOMFORT_FRACTION = 0.01
DETECTABLE_FRACTION = 1e-4

# --- Grid / Receptors ---
RECEPTOR_HEIGHT_M = 1.5               # Breathing height
GRID_MIN_CONCENTRATION_MG_M3 = 1e-3   # Cells below this are omitted from grid results
MAX_GRID_POINTS = 250_000             # Upper bound on cells evaluated per grid request

# --- Centerline Search ---
CENTERLINE_SAMPLES = 100
CENTERLINE_MAX_DISTANCE_M = 10_000.0
