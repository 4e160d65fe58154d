ICONS = {
    "dashboard": "D",
    "weather_data": "W",
    "analytics": "A",
    "locations": "L",
    "settings": "S",
    "temp": "T",
    "humidity": "H",
    "precip": "P",
    "volatility": "V",
}


def icon(name: str) -> str:
    return ICONS.get(name, "?")
