import uuid
from datetime import datetime, timedelta, timezone

import numpy as np
import pandas as pd

from journeys.geometry import straight_line_distance_km

# Abergavenny -> Birmingham New Street and the usual interchanges on that corridor
ORIGIN = {"name": "Abergavenny", "crs": "AGV", "lat": 51.8241, "lon": -3.0175}
DESTINATION = {"name": "Birmingham New Street", "crs": "BHM", "lat": 52.4778, "lon": -1.8996}
INTERCHANGES = [
    {"name": "Hereford", "crs": "HFD", "lat": 52.0614, "lon": -2.7080},
    {"name": "Newport", "crs": "NWP", "lat": 51.5889, "lon": -3.0003},
    {"name": "Shrewsbury", "crs": "SHR", "lat": 52.7118, "lon": -2.7497},
    {"name": "Bristol Temple Meads", "crs": "BRI", "lat": 51.4493, "lon": -2.5831},
    {"name": "Worcester Foregate Street", "crs": "WOF", "lat": 52.1953, "lon": -2.2216},
]
OPERATORS = ["TFW", "WMT", "XC", "GW"]

COLUMNS = [
    "itinerary_id", "leg_index", "mode",
    "from_name", "from_stop", "to_name", "to_stop",
    "start_time_ms", "end_time_ms", "distance_m", "trip_id", "route_id",
]


def generate_mock_itineraries(num_itineraries=20, missing_distance_rate=0.05,
                              output_file="raw_itineraries_generated.csv", seed=None):
    """
    Generates planner-shaped itineraries (one CSV row per leg) for the
    AGV -> BHM corridor. Routes go direct or through 1-2 interchanges with a
    track-curvature factor on each leg, so detour ratios vary realistically.
    A small share of legs has no distance, to exercise failure isolation.
    """
    rng = np.random.default_rng(seed)
    base = datetime.now(timezone.utc).replace(hour=7, minute=0, second=0, microsecond=0)

    rows = []
    for itinerary_index in range(num_itineraries):
        itinerary_id = f"it_{str(itinerary_index + 1).zfill(4)}"

        num_changes = int(rng.choice([0, 1, 2], p=[0.2, 0.55, 0.25]))
        picks = rng.choice(len(INTERCHANGES), size=num_changes, replace=False)
        stations = [ORIGIN] + [INTERCHANGES[i] for i in picks] + [DESTINATION]

        current = base + timedelta(minutes=int(rng.integers(0, 180)))
        for leg_index, (a, b) in enumerate(zip(stations[:-1], stations[1:])):
            crow_km = straight_line_distance_km((a["lat"], a["lon"]), (b["lat"], b["lon"]))
            track_km = crow_km * rng.uniform(1.05, 1.35)
            ride_min = track_km / rng.uniform(70, 110) * 60

            start = current
            end = start + timedelta(minutes=float(ride_min))
            operator = str(rng.choice(OPERATORS))

            distance = "" if rng.random() < missing_distance_rate else round(track_km * 1000, 1)

            rows.append({
                "itinerary_id": itinerary_id,
                "leg_index": leg_index,
                "mode": "RAIL",
                "from_name": a["name"],
                "from_stop": f"1:{a['crs']}",
                "to_name": b["name"],
                "to_stop": f"1:{b['crs']}",
                "start_time_ms": int(start.timestamp() * 1000),
                "end_time_ms": int(end.timestamp() * 1000),
                "distance_m": distance,
                "trip_id": f"1:{str(uuid.uuid4())[:8]}",
                "route_id": f"1:{operator}-{int(rng.integers(1, 9))}",
            })

            # connection time before the next leg
            current = end + timedelta(minutes=int(rng.integers(4, 25)))

    df = pd.DataFrame(rows, columns=COLUMNS)
    df.to_csv(output_file, index=False)
    print(f"✅ Generated {num_itineraries} itineraries ({len(df)} legs) and saved to '{output_file}'")

    print("\nInterchange counts:")
    counts = df.groupby("itinerary_id").size().sub(1).value_counts().sort_index()
    for changes, count in counts.items():
        print(f"  {changes} change(s): {count} itineraries")

    return df


if __name__ == "__main__":
    generate_mock_itineraries(num_itineraries=40, seed=7)
