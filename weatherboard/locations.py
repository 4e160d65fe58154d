import math

# Below the Dead Sea shore to above Everest.
MIN_ELEVATION_M = -500
MAX_ELEVATION_M = 9000


class LocationValidationError(ValueError):
    pass


def _parse_float(value) -> float | None:
    if value is None:
        return None
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def validate_location(name, latitude, longitude, elevation=None, timezone=None) -> dict:
    """
    Check the Add Location form and build the insert payload.

    Raises LocationValidationError with a message fit to show in the form.
    """
    clean_name = (name or "").strip()
    if not clean_name:
        raise LocationValidationError("Location name is required")

    lat = _parse_float(latitude)
    if lat is None or lat < -90 or lat > 90:
        raise LocationValidationError("Valid latitude is required (-90 to 90)")

    lon = _parse_float(longitude)
    if lon is None or lon < -180 or lon > 180:
        raise LocationValidationError("Valid longitude is required (-180 to 180)")

    elev = None
    if elevation not in (None, ""):
        parsed = _parse_float(elevation)
        if parsed is None:
            raise LocationValidationError("Elevation must be a whole number of meters")
        if parsed < MIN_ELEVATION_M or parsed > MAX_ELEVATION_M:
            raise LocationValidationError(
                f"Elevation must be between {MIN_ELEVATION_M} and {MAX_ELEVATION_M} meters"
            )
        elev = int(parsed)

    return {
        "name": clean_name,
        "latitude": lat,
        "longitude": lon,
        "elevation": elev,
        "timezone": (timezone or "").strip() or None,
    }
