"""
AC process train configuration and constants.
"""

from enum import Enum


class UnitSystem(str, Enum):
    SI = "SI"  # Metric (°C, kW, g/kg, m³/min, Pa)
    IP = "IP"  # Imperial (°F, BTU/h, gr/lb, CFM, in.w.g.)


class EquipmentType(str, Enum):
    FILTER = "filter"
    BURNER = "burner"
    COOLING_COIL = "cooling_coil"
    HEATING_COIL = "heating_coil"
    ELIMINATOR = "eliminator"
    SPRAY_WASHER = "spray_washer"
    STEAM_HUMIDIFIER = "steam_humidifier"
    FAN = "fan"
    DAMPER = "damper"
    CUSTOM = "custom"


class SteamPressureUnit(str, Enum):
    PAG = "pag"
    KPAG = "kpag"
    MPAG = "mpag"
    PSIG = "psig"
    BARG = "barg"
    KGFCM2G = "kgfcm2g"


# Default atmospheric pressure at sea level
DEFAULT_PRESSURE_SI = 101325.0  # Pa
DEFAULT_ALTITUDE_SI = 0.0  # m

# Psychrometric constants (SI, kJ and g/kg based)
SPECIFIC_HEAT_DRY_AIR = 1.006  # kJ/(kg·K)
LATENT_HEAT_VAPORIZATION_0C = 2501.0  # kJ/kg
SPECIFIC_HEAT_WATER_VAPOR = 1.86  # kJ/(kg·K)
GAS_CONSTANT_DRY_AIR = 287.058  # J/(kg·K)
MOLECULAR_WEIGHT_RATIO = 0.622  # M_water / M_dry_air

# Magnus coefficients for saturation pressure over water
MAGNUS_A = 610.78  # Pa
MAGNUS_B = 17.27
MAGNUS_C = 237.3  # °C

# Equipment-side constants
MOIST_AIR_SPECIFIC_HEAT = 1.02  # kJ/(kg·K), used for sensible rise/drop
WATER_SPECIFIC_HEAT = 4.186  # kJ/(kg·K)

# Iterative solver settings
SPRAY_WASHER_MAX_ITER = 20
STEAM_HUMIDIFIER_MAX_ITER = 30
SOLVER_DAMPING = 0.1
RH_TOLERANCE = 0.01  # %RH points
ENERGY_TOLERANCE = 0.01  # kJ/kg(DA)
SOLVER_T_MIN = -50.0  # °C
SOLVER_T_MAX = 90.0  # °C
SOLVER_SCAN_STEP = 2.0  # K, bracket search grid

# Dew point reported for perfectly dry air
DRY_AIR_DEW_POINT = -100.0  # °C

# Equipment that does not alter the air state
PASS_THROUGH_TYPES = frozenset({
    EquipmentType.FILTER,
    EquipmentType.ELIMINATOR,
    EquipmentType.DAMPER,
    EquipmentType.CUSTOM,
})

# Equipment whose outlet is purely computed from the inlet
COMPUTED_OUTLET_TYPES = frozenset({
    EquipmentType.FAN,
    EquipmentType.FILTER,
    EquipmentType.DAMPER,
    EquipmentType.ELIMINATOR,
    EquipmentType.CUSTOM,
})

# Equipment driven by a target outlet relative humidity
RH_DRIVEN_TYPES = frozenset({
    EquipmentType.SPRAY_WASHER,
    EquipmentType.STEAM_HUMIDIFIER,
})

EQUIPMENT_COLORS = {
    EquipmentType.FILTER: "#94a3b8",
    EquipmentType.BURNER: "#f59e0b",
    EquipmentType.COOLING_COIL: "#2563eb",
    EquipmentType.HEATING_COIL: "#ef4444",
    EquipmentType.ELIMINATOR: "#14b8a6",
    EquipmentType.SPRAY_WASHER: "#22d3ee",
    EquipmentType.STEAM_HUMIDIFIER: "#ec4899",
    EquipmentType.FAN: "#a855f7",
    EquipmentType.DAMPER: "#64748b",
    EquipmentType.CUSTOM: "#6366f1",
}

EQUIPMENT_NAMES = {
    EquipmentType.FILTER: "Filter",
    EquipmentType.BURNER: "Burner",
    EquipmentType.COOLING_COIL: "Cooling Coil",
    EquipmentType.HEATING_COIL: "Heating Coil",
    EquipmentType.ELIMINATOR: "Eliminator",
    EquipmentType.SPRAY_WASHER: "Spray Washer",
    EquipmentType.STEAM_HUMIDIFIER: "Steam Humidifier",
    EquipmentType.FAN: "Fan",
    EquipmentType.DAMPER: "Damper",
    EquipmentType.CUSTOM: "Custom",
}

# Project defaults
DEFAULT_AIRFLOW = 100.0  # m³/min
DEFAULT_PRESSURE_LOSS = 50.0  # Pa
DEFAULT_INLET_REFERENCE = (0.0, 50.0)  # (°C, %RH)
DEFAULT_OUTLET_REFERENCE = (27.0, 70.0)  # (°C, %RH)
