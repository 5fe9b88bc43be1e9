"""Temperature conversion and formatting; the domain model is always Celsius."""
import enum


class TemperatureUnit(enum.Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    KELVIN = "kelvin"

    @property
    def symbol(self) -> str:
        return {"celsius": "°C", "fahrenheit": "°F", "kelvin": "K"}[self.value]


def convert(celsius: float, unit: TemperatureUnit) -> float:
    """Convert a Celsius temperature to unit."""
    if unit is TemperatureUnit.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    if unit is TemperatureUnit.KELVIN:
        return celsius + 273.15
    return celsius


def format_temperature(celsius: float, unit: TemperatureUnit, with_symbol: bool = True) -> str:
    """Round to a whole degree, e.g. ``format_temperature(21.5, TemperatureUnit.CELSIUS) == "22°C"``."""
    # Half-up rounding, not Python's banker's rounding.
    value = convert(celsius, unit)
    rounded = int(value + 0.5) if value >= 0 else -int(-value + 0.5)
    return f"{rounded}{unit.symbol}" if with_symbol else str(rounded)


def parse_unit(name: str) -> TemperatureUnit:
    """
    Raises:
        ValueError: If name is not a known unit
    """
    try:
        return TemperatureUnit(name.strip().lower())
    except ValueError:
        choices = ", ".join(u.value for u in TemperatureUnit)
        raise ValueError(f"Unknown temperature unit '{name}' (expected one of: {choices})")
