from common.units import Q_

G_STANDARD = Q_(9.81, "m/s^2")

# outer inference rounds and continuity sub-rounds per outer round
MAX_ROUNDS = 5
CONTINUITY_ROUNDS = 3

# station field -> dimension understood by UnitConverter
FIELD_DIMENSIONS = {
    "p":   "pressure",
    "rho": "density",
    "v":   "velocity",
    "Q":   "flow_rate",
    "A":   "area",
    "h":   "length",
}

STATION_FIELDS = tuple(FIELD_DIMENSIONS)
ENERGY_FIELDS = ("Kin", "Pot")
