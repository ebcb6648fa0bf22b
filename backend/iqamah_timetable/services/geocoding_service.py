import requests
from flask import current_app

# Known locations that skip the lookup, keyed by (city, state) in lower case.
KNOWN_LOCATIONS = {
    ('glen ellyn', 'illinois'): {"lat": 41.8796, "lon": -88.0658},
    ('glen ellyn', 'il'): {"lat": 41.8796, "lon": -88.0658},
}


def geocode_city(city, state, country="USA"):
    """
    Fetches coordinates for a city/state pair using Nominatim (OpenStreetMap).

    Returns:
        dict: {"city", "state", "lat", "lon"} on success, or {"error": message}.
    """
    if not city or not state:
        return {"error": "City and state are required."}

    key = (city.strip().lower(), state.strip().lower())
    if key in KNOWN_LOCATIONS:
        current_app.logger.info(f"Geocoding: Using known coordinates for {city}, {state}")
        return {"city": city, "state": state, **KNOWN_LOCATIONS[key]}

    endpoint = f"{current_app.config.get('NOMINATIM_BASE_URL', 'https://nominatim.openstreetmap.org').rstrip('/')}/search"
    params = {"city": city, "state": state, "country": country, "format": "json", "limit": 1}
    headers = {"User-Agent": current_app.config.get('NOMINATIM_USER_AGENT', 'iqamah-timetable')}

    try:
        response = requests.get(endpoint, params=params, headers=headers,
                                timeout=current_app.config.get('PROVIDER_TIMEOUT_SECONDS', 10))
        response.raise_for_status()
        data = response.json()

        if not data:
            current_app.logger.warning(f"Geocoding: No match for {city}, {state}")
            return {"error": "Location not found."}

        location = data[0]
        return {
            "city": city,
            "state": state,
            "lat": float(location['lat']),
            "lon": float(location['lon']),
        }
    except requests.exceptions.RequestException as e:
        current_app.logger.error(f"Nominatim geocoding request failed: {e}")
        return {"error": "Failed to connect to geocoding service."}
    except (KeyError, IndexError, TypeError, ValueError) as e:
        current_app.logger.error(f"Failed to parse Nominatim geocoding response: {e}")
        return {"error": "Invalid response from geocoding service."}
