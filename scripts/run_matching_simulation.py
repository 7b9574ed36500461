import csv
import logging
import os
import time
from collections import OrderedDict
from typing import Any, Dict, List

from journeys.scoring import best_per_corridor, policy_from_env, score_batch
from matching.matcher import summarize_route

# Abergavenny -> Birmingham New Street (matches generate_mock_itineraries.py)
ORIGIN = (51.8241, -3.0175)
DESTINATION = (52.4778, -1.8996)


def load_itineraries(filepath="raw_itineraries_generated.csv", limit=None) -> List[Dict[str, Any]]:
    """
    Rebuild planner-shaped itinerary dicts from a one-row-per-leg CSV.
    Blank distance cells stay missing so the scorer sees them as absent.
    """
    grouped: "OrderedDict[str, List[Dict[str, str]]]" = OrderedDict()

    with open(filepath, "r", newline="") as file:
        reader = csv.DictReader(file)
        for row in reader:
            grouped.setdefault(row["itinerary_id"], []).append(row)

    itineraries = []
    for itinerary_id, rows in grouped.items():
        if limit is not None and len(itineraries) >= limit:
            break

        rows.sort(key=lambda r: int(r["leg_index"]))
        legs = []
        for row in rows:
            leg = {
                "mode": row["mode"],
                "from": {"name": row["from_name"], "stop": {"gtfsId": row["from_stop"]}},
                "to": {"name": row["to_name"], "stop": {"gtfsId": row["to_stop"]}},
                "startTime": int(row["start_time_ms"]),
                "endTime": int(row["end_time_ms"]),
                "trip": {"gtfsId": row["trip_id"]},
                "route": {"gtfsId": row["route_id"]},
            }
            if row.get("distance_m"):
                leg["distance"] = float(row["distance_m"])
            legs.append(leg)

        itineraries.append({
            "id": itinerary_id,
            "startTime": legs[0]["startTime"],
            "endTime": legs[-1]["endTime"],
            "legs": legs,
        })

    return itineraries


def run_simulation(input_path="raw_itineraries_generated.csv", output_path=None, limit=None):
    print("=== STARTING OFFLINE CORRIDOR MATCHING SIMULATION ===")

    # 1. Load Data
    itineraries = load_itineraries(input_path, limit=limit)
    print(f"Loaded {len(itineraries)} Itineraries.\n")

    # 2. Configure System
    policy = policy_from_env()

    # 3. Score every itinerary (failures are isolated per itinerary)
    start_time = time.time()
    result = score_batch(itineraries, ORIGIN, DESTINATION, policy=policy)
    print(f"Scored {len(result.ranked)} itineraries in {time.time() - start_time:.3f}s.")
    print(result.summary() + "\n")

    # 4. Best route per corridor
    best = best_per_corridor(result.ranked)

    if output_path is None:
        base_dir = os.path.dirname(os.path.abspath(input_path))
        output_path = os.path.join(base_dir, "matching_results.csv")

    with open(output_path, "w", newline="") as file:
        writer = csv.writer(file)
        writer.writerow([
            "rank", "itinerary_id", "corridor", "score_min", "duration_min",
            "detour_ratio", "detour_penalty_min", "transfers", "transfer_penalty_min",
        ])

        print("--- Best Route Per Corridor ---")
        for rank, route in enumerate(best, 1):
            s = route.corridor_score
            source_id = itineraries[route.index].get("id", route.index)
            writer.writerow([
                rank, source_id, s.corridor_id, round(s.score, 1), round(s.duration_minutes, 1),
                round(s.detour_ratio, 3), round(s.detour_penalty, 1), s.transfer_count,
                round(s.transfer_penalty, 1),
            ])
            summary = summarize_route(route)
            print(f"{rank}. {s.corridor_id} -> score {summary.score} ({summary.total_duration}, "
                  f"{s.transfer_count} change(s), detour {s.detour_ratio:.2f})")

        for failure in result.failures:
            source_id = itineraries[failure.index].get("id", failure.index)
            writer.writerow(["FAILED", source_id, failure.kind, "", "", "", "", "", ""])
            print(f"[FAILED] {source_id}: {failure.message}")

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Corridors ranked: {len(best)}")
    print(f"Results written to '{output_path}'.")

    return best, result.failures


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_simulation()
